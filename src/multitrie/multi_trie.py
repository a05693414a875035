from collections.abc import Mapping
from functools import partial, reduce

from pyrsistent import PMap, pmap, pvector

from . import multiset
from .config import DRAW_CONFIG
from .logging import get_logger
from .path import path, pathify
from .tree import Tree, draw_tree

logger = get_logger(__name__)


class MultiTrieError(Exception):
    pass

MTError = MultiTrieError


class MultiTrie:
    """Implements a multi-trie: a prefix tree whose every node holds a
    multiset of values.
    https://en.wikipedia.org/wiki/Trie

    A path in the trie is a `Path` (or anything `pathify` accepts).
    The values are arbitrary Python values that support `==`; labels must be
    hashable, and orderable if the trie is to be drawn in a stable order.

    Multi-tries are immutable. Every operation returns a new trie and shares
    untouched subtries with its operands.

    A node with no values and no children is 'null'. Only `update`,
    `intersection` and `cleanup_empties` drop null subtries, so two tries
    can both be null without being equal.
    """

    # True when every descendant is equal to the node itself.
    uniform = False

    def __init__(self, values=(), children=None):
        if multiset.is_infinite(values):
            self.values = values
        else:
            self.values = pvector(values)
        if isinstance(children, PMap):
            self.children = children
        else:
            self.children = pmap(children or {})

    # Queries.

    def is_null(self):
        if self.values:
            return False
        return all(child.is_null() for child in self.children.values())

    def size(self):
        """Total number of values over all nodes."""
        if multiset.is_infinite(self.values):
            raise MTError('Cannot take the size of a multi-trie node '
                'with infinitely many values.')
        return len(self.values) + sum(child.size() for child in self.children.values())

    def lookup(self, path):
        """The subtrie at `path`, or `EMPTY` if there is none."""
        path = pathify(path)
        if not path:
            return self
        child = self.children.get(path.first())
        if child is None:
            return EMPTY
        return child.lookup(path.rest())

    def values_by_path(self, path):
        return self.lookup(path).values

    def subtries(self):
        for label, child in self.children.items():
            yield (label, child)

    def items(self):
        """Yield a `(path, value)` pair for every value occurrence."""
        for address, node in self._walk(path()):
            if multiset.is_infinite(node.values):
                raise MTError(f'Infinitely many values at {address}')
            for value in node.values:
                yield (address, value)

    def _walk(self, prefix):
        yield (prefix, self)
        for label, child in self.children.items():
            yield from child._walk(prefix + (label,))

    # Mutators. All return a new trie.

    def update(self, path, f):
        """Replace the subtrie `s` at `path` by `f(s)`.

        Missing nodes along `path` start out as `EMPTY`. A child that is
        null after the update is dropped from its parent.
        """
        path = pathify(path)
        if not path:
            return f(self)
        label = path.first()
        child = self.children.get(label, EMPTY).update(path.rest(), f)
        return self._with_child(label, child)

    def _with_child(self, label, child):
        if child.is_null():
            return MultiTrie(self.values, self.children.discard(label))
        return MultiTrie(self.values, self.children.set(label, child))

    def _with_values(self, values):
        return MultiTrie(values, self.children)

    def add(self, value):
        return self._with_values(multiset.union(pvector([value]), self.values))

    def add_by_path(self, path, value):
        return self.update(path, lambda trie: trie.add(value))

    def replace(self, path, subtrie):
        _check_multi_trie(subtrie)
        return self.update(path, lambda _: subtrie)

    def delete(self, path):
        return self.replace(path, EMPTY)

    def unite(self, path, subtrie):
        _check_multi_trie(subtrie)
        return self.update(path, subtrie.union)

    def intersect(self, path, subtrie):
        _check_multi_trie(subtrie)
        return self.update(path, subtrie.intersection)

    # Mapping.

    def map_containers(self, g):
        """Replace every node's whole multiset `vs` with `g(vs)`."""
        return _node(
            multiset.map_container(g, self.values),
            _map_children(lambda child: child.map_containers(g), self.children))

    def map_containers_with_path(self, g):
        """Replace every node's whole multiset `vs` with `g(path, vs)`."""
        return self._map_containers_with_path(g, path())

    def _map_containers_with_path(self, g, prefix):
        return _node(
            multiset.map_container(partial(g, prefix), self.values),
            _map_children_with_label(
                lambda label, child: child._map_containers_with_path(g, prefix + (label,)),
                self.children))

    def map(self, f):
        return self.map_containers(lambda xs: [f(x) for x in xs])

    def map_with_path(self, f):
        return self.map_containers_with_path(lambda p, xs: [f(p, x) for x in xs])

    def map_all(self, fs):
        """Apply every function of the multiset `fs` to every value.

        A node holding `vs` ends up holding `len(fs) * len(vs)` values.
        """
        fs = pvector(fs)
        return self.map_containers(lambda xs: multiset.apply(fs, xs))

    def map_all_with_path(self, fs):
        fs = pvector(fs)
        return self.map_containers_with_path(
            lambda p, xs: multiset.apply([partial(f, p) for f in fs], xs))

    # Algebra.

    def union(self, other):
        """Every path of either trie, with the multisets under it added up."""
        _check_multi_trie(other)
        if self.uniform and other.uniform and \
                set(self.children) == set(other.children):
            return repeat(self.children.labels, multiset.union(self.values, other.values))
        return zip_contents_and_children(
            multiset.union,
            lambda p, q: _union_with(MultiTrie.union, p.children, q.children),
            self, other)

    def intersection(self, other):
        """Paths of both tries, with the multisets under them intersected.

        Subtries that come out null are pruned.
        """
        _check_multi_trie(other)
        if self.uniform and other.uniform:
            labels = [label for label in self.children.labels if label in other.children]
            return _null_to_empty(
                repeat(labels, multiset.intersection(self.values, other.values)))
        trie = zip_contents_and_children(
            multiset.intersection,
            lambda p, q: _prune(_intersection_with(MultiTrie.intersection, p.children, q.children)),
            self, other)
        return _null_to_empty(trie)

    def cartesian_product(self, other):
        """Every path `s + t` for `s` in this trie and `t` in `other`, holding
        the pairs `(v, w)` of the values under `s` and under `t`."""
        return self.map(lambda v: partial(_pair, v)).apply_cartesian(other)

    def flatten(self):
        """Collapse a trie whose values are multi-tries.

        A value trie found under path `s` contributes its values under `t`
        to path `s + t` of the result.
        """
        if multiset.is_infinite(self.values):
            raise MTError('Cannot flatten infinitely many multi-tries.')
        return unions(self.values).union(
            _node((), _map_children(MultiTrie.flatten, self.children)))

    def bind_cartesian(self, f):
        return self.map(f).flatten()

    def apply_cartesian(self, trie):
        """Apply this trie of functions to `trie`; the function under `s` is
        applied to every value under `t` and the result lands under `s + t`."""
        return self.map(trie.map).flatten()

    def apply_uniting(self, trie):
        return _apply_zipping_children(
            partial(_union_with, MultiTrie.union), self, trie)

    def apply_intersecting(self, trie):
        return _apply_zipping_children(
            partial(_intersection_with, MultiTrie.intersection), self, trie)

    # Conversion.

    def to_map(self):
        """A dict from `Path` to the multiset of values under it.

        Nodes with no values are left out.
        """
        return {address: node.values for address, node in self._walk(path()) if node.values}

    def cleanup_empties(self):
        """The same trie with every null subtrie pruned."""
        children = _prune({label: child.cleanup_empties()
            for label, child in self.children.items()})
        return _null_to_empty(MultiTrie(self.values, children))

    def to_tree(self, label_fn=repr, values_fn=None, config=None):
        """A `Tree` in which value-multiset nodes alternate with label nodes."""
        if values_fn is None:
            values_fn = _show_values
        if config is None:
            config = DRAW_CONFIG
        return self._to_tree(label_fn, values_fn, config)

    def _to_tree(self, label_fn, values_fn, config):
        root = values_fn(self.values)
        if not self.children:
            return Tree(root)
        if config.exhausted():
            return Tree(root, [Tree(config.elision)])
        deeper = config.deeper()
        return Tree(root, [Tree(label_fn(label), [child._to_tree(label_fn, values_fn, deeper)])
            for label, child in _sorted_items(self.children)])

    def draw(self, config=None):
        return draw_tree(self.to_tree(config=config))

    # Python protocol.

    def __bool__(self):
        return not self.is_null()

    def __iter__(self):
        raise NotImplementedError('Cannot iterate over a multi-trie, '
            'use trie.items() or trie.subtries().')

    def __or__(self, other):
        return self.union(other)

    def __and__(self, other):
        return self.intersection(other)

    def __eq__(self, x):
        if not isinstance(x, MultiTrie):
            return False
        if not multiset.equal(self.values, x.values):
            return False
        if set(self.children) != set(x.children):
            return False
        return all(child == x.children[label] for label, child in self.children.items())

    __hash__ = None

    def __repr__(self):
        return 'MultiTrie(%s, %r)' % (_show_values(self.values), dict(self.children))


class LazyChildren(Mapping):
    """A read-only children mapping over a finite set of labels whose
    subtries are computed on access by `make_child(label)`."""

    def __init__(self, labels, make_child):
        self.labels = tuple(dict.fromkeys(labels))
        self._label_set = frozenset(self.labels)
        self.make_child = make_child

    def __getitem__(self, label):
        if label not in self._label_set:
            raise KeyError(label)
        return self.make_child(label)

    def __contains__(self, label):
        return label in self._label_set

    def __iter__(self):
        return iter(self.labels)

    def __len__(self):
        return len(self.labels)


class LazyMultiTrie(MultiTrie):
    """A possibly infinite multi-trie whose children are computed on demand.

    Operations that must visit every node (`size`, `items`, `to_map`,
    `cleanup_empties`, unbounded `draw`) raise `MultiTrieError` here instead
    of running forever. Bound the trie first, e.g. with `lookup` or by
    intersecting it with a finite trie.
    """

    def __init__(self, values, labels, make_child, uniform=False):
        if multiset.is_infinite(values):
            self.values = values
        else:
            self.values = pvector(values)
        self.children = LazyChildren(labels, make_child)
        self.uniform = uniform

    def is_null(self):
        if self.values:
            return False
        if self.uniform or not self.children:
            return True
        raise MTError('Cannot decide whether an infinite multi-trie is null.')

    def size(self):
        if self.uniform and not self.values:
            return 0
        raise MTError('Cannot take the size of an infinite multi-trie.')

    def _walk(self, prefix):
        raise MTError(f'Cannot traverse an infinite multi-trie (at {prefix}).')

    def _with_child(self, label, child):
        children = self.children
        if child.is_null():
            labels = [l for l in children.labels if l != label]
        else:
            labels = children.labels + (label,)

        def make_child(l):
            return child if l == label else children[l]

        return LazyMultiTrie(self.values, labels, make_child)

    def _with_values(self, values):
        return LazyMultiTrie(values, self.children.labels, self.children.make_child)

    def map_containers(self, g):
        if self.uniform:
            return repeat(self.children.labels, multiset.map_container(g, self.values))
        return super().map_containers(g)

    def cleanup_empties(self):
        raise MTError('Cannot clean up an infinite multi-trie.')

    def _to_tree(self, label_fn, values_fn, config):
        if config.max_depth is None:
            raise MTError('Cannot draw an infinite multi-trie without a max_depth.')
        return super()._to_tree(label_fn, values_fn, config)

    def __eq__(self, x):
        if isinstance(x, LazyMultiTrie):
            if self is x:
                return True
            if self.uniform and x.uniform:
                return set(self.children) == set(x.children) \
                    and multiset.equal(self.values, x.values)
            raise MTError('Cannot compare two infinite multi-tries.')
        return super().__eq__(x)

    def __repr__(self):
        return 'LazyMultiTrie(%s, %r)' % (_show_values(self.values), list(self.children.labels))


# Constructors.

EMPTY = MultiTrie()

def singleton(value):
    return MultiTrie([value])

def repeat(labels, values):
    """An infinite trie in which every node holds `values` and has a child
    under each of `labels`, that child being the node itself."""

    def make_child(label):
        return trie

    trie = LazyMultiTrie(values, labels, make_child, uniform=True)
    return trie

def top(label_domain, value_domain):
    """The trie holding every value of `value_domain` infinitely often at
    every path over `label_domain`.

    Both domains must be finite iterables, e.g. an `enum.Enum` subclass.
    `top` is the neutral element of `intersection`.
    """
    label_domain = list(label_domain)
    value_domain = list(value_domain)
    logger.debug('Building top over %d labels and %d values',
        len(label_domain), len(value_domain))
    return repeat(label_domain, multiset.CycledValues((), value_domain))

def from_list(pairs):
    """Build a trie from `(path, value)` pairs. Values given under the same
    path accumulate in order."""
    trie = EMPTY
    for address, value in reversed(list(pairs)):
        trie = trie.add_by_path(address, value)
    return trie

def from_map(mapping):
    """Inverse of `MultiTrie.to_map`: build a trie from a mapping of paths
    onto multisets of values."""
    return from_list((address, value)
        for address, values in mapping.items() for value in values)

def unions(tries):
    return reduce(MultiTrie.union, tries, EMPTY)

def intersections(tries, label_domain=None, value_domain=None):
    """Intersect all of `tries`.

    Folding starts from `top(label_domain, value_domain)` when both domains
    are given, so that no tries at all intersect to `top`.
    """
    tries = list(tries)
    if label_domain is not None and value_domain is not None:
        return reduce(MultiTrie.intersection, tries, top(label_domain, value_domain))
    if not tries:
        raise MTError('Cannot intersect zero multi-tries without a label '
            'and value domain.')
    return reduce(MultiTrie.intersection, tries)


# Structural combinators.

def zip_contents_and_children(combine_values, combine_children, p, q):
    """Build the node whose values are `combine_values(p.values, q.values)`
    and whose children are `combine_children(p, q)`.

    `combine_children` returns either a dict or a `LazyChildren`.
    """
    return _node(combine_values(p.values, q.values), combine_children(p, q))

def _node(values, children):
    if isinstance(children, LazyChildren):
        return LazyMultiTrie(values, children.labels, children.make_child)
    return MultiTrie(values, children)

def _is_lazy(children):
    return isinstance(children, LazyChildren)

def _map_children(f, children):
    return _map_children_with_label(lambda label, child: f(child), children)

def _map_children_with_label(f, children):
    if _is_lazy(children):
        return LazyChildren(children.labels, lambda label: f(label, children[label]))
    return {label: f(label, child) for label, child in children.items()}

def _union_with(f, m1, m2):
    # Children of a lazy side may themselves unite on construction (see
    # flatten), so they must not be forced here.
    if _is_lazy(m1) or _is_lazy(m2):
        logger.debug('Uniting children maps lazily')

        def make_child(label):
            if label in m1 and label in m2:
                return f(m1[label], m2[label])
            return m1[label] if label in m1 else m2[label]

        return LazyChildren(list(m1) + list(m2), make_child)
    result = dict(m1.items())
    for label, child in m2.items():
        result[label] = f(result[label], child) if label in m1 else child
    return result

def _intersection_with(f, m1, m2):
    if _is_lazy(m1) and _is_lazy(m2):
        logger.debug('Intersecting two infinite children maps lazily')
        labels = [label for label in m1.labels if label in m2]
        return LazyChildren(labels, lambda label: f(m1[label], m2[label]))
    # Drive the recursion from a finite side.
    labels = m2 if _is_lazy(m1) else m1
    return {label: f(m1[label], m2[label]) for label in labels
        if label in m1 and label in m2}

def _apply_zipping_children(combine_children, fs, xs):
    return zip_contents_and_children(
        multiset.apply,
        lambda p, q: combine_children(
            _map_children(partial(_apply_zipping_children, combine_children, p), q.children),
            _map_children(lambda f: _apply_zipping_children(combine_children, f, q), p.children)),
        fs, xs)

def _prune(children):
    if _is_lazy(children):
        return children
    return {label: child for label, child in children.items() if not child.is_null()}

def _null_to_empty(trie):
    if isinstance(trie, LazyMultiTrie) and not trie.uniform:
        return trie
    return EMPTY if trie.is_null() else trie


# Helpers.

def _check_multi_trie(x):
    if not isinstance(x, MultiTrie):
        raise MTError(f'Expected a MultiTrie, got {x!r}')

def _pair(v, w):
    return (v, w)

def _show_values(values):
    if multiset.is_infinite(values):
        return repr(values)
    return repr(list(values))

def _sorted_items(children):
    try:
        return sorted(children.items(), key=lambda item: item[0])
    except TypeError:
        # Labels of mixed types keep their insertion order.
        return list(children.items())
