import enum

from multitrie.config import DrawConfig
from multitrie.logging import enable_debug_logging
from multitrie.multi_trie import EMPTY, from_list, singleton, top
from multitrie.path import path

enable_debug_logging()

# Build multi-tries from (path, value) pairs.

t1 = from_list([(['a'], 1), (['a'], 1), (['b'], 2)])
t2 = from_list([(['a'], 1), (['a'], 3)])
print(t1.draw())

assert sorted(t1.values_by_path('a')) == [1, 1]
assert t1.size() == 3

# Union adds multiplicities, intersection matches them.

print((t1 | t2).to_map())
assert list((t1 & t2).values_by_path('a')) == [1]

# Functorial mapping.

print(t1.map(lambda x: x + 1).to_map())
print(t1.map_with_path(lambda p, x: (p, x)).to_map())

# Cartesian product: paths concatenate and values pair up.

q = from_list([(['x'], 'u'), (['y'], 'v')])
product = t1.cartesian_product(q)
print(product.draw())
assert product.size() == t1.size() * q.size()

# Tries of tries collapse with flatten.

nested = from_list([(['outer'], t1), (['outer'], singleton(0))])
print(nested.flatten().to_map())

# top is infinite: bound it by intersecting with a finite trie.

class Color(enum.Enum):
    RED = 1
    GREEN = 2

everything = top(['a', 'b'], Color)
palette = from_list([(['a'], Color.RED), (['c'], Color.GREEN)])
print((palette & everything).to_map())
assert (palette & everything).lookup('c') is EMPTY
print(everything.draw(DrawConfig(max_depth=1)))
print(everything.lookup(path('a', 'b', 'a')))
