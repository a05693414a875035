"""Multiset algebra over the value containers held by multi-trie nodes.

A finite container is a `PVector` whose order is kept for determinism but
ignored by every operation here. An infinite container is a `CycledValues`.
Values only need to support `==`; they are never hashed.
"""
import itertools

from pyrsistent import pvector


class CycledValues:
    """An infinite multiset.

    Every element of `cycle` occurs infinitely often; every element of
    `prefix` occurs as many times as it is listed. Iterating yields the
    prefix and then repeats the cycle forever, so never call `list()` on it.
    """

    def __init__(self, prefix, cycle):
        self.prefix = pvector(prefix)
        self.cycle = pvector(cycle)

    def __iter__(self):
        return itertools.chain(self.prefix, itertools.cycle(self.cycle))

    def __contains__(self, x):
        return x in self.cycle or x in self.prefix

    def __bool__(self):
        return bool(self.prefix) or bool(self.cycle)

    def __eq__(self, x):
        return isinstance(x, CycledValues) and equal(self, x)

    def __repr__(self):
        return 'CycledValues(%r, %r)' % (list(self.prefix), list(self.cycle))


def is_infinite(xs):
    return isinstance(xs, CycledValues)

def _parts(xs):
    if is_infinite(xs):
        return xs.prefix, xs.cycle
    return pvector(xs), pvector()

def _cycled(prefix, cycle):
    if not cycle:
        return pvector(prefix)
    return CycledValues(prefix, cycle)

def _intersect_finite(xs, ys):
    # Each match consumes one occurrence on the right.
    remaining = list(ys)
    result = []
    for x in xs:
        if x in remaining:
            result.append(x)
            remaining.remove(x)
    return result


def union(xs, ys):
    """Multiset union: multiplicities add up."""
    if not is_infinite(xs) and not is_infinite(ys):
        return pvector(xs).extend(ys)
    xp, xc = _parts(xs)
    yp, yc = _parts(ys)
    return _cycled(xp.extend(yp), xc.extend(y for y in yc if y not in xc))

def intersection(xs, ys):
    """Multiset intersection: every occurrence in `xs` is matched against a
    distinct occurrence in `ys`.

    Only the finite parts are ever iterated, so this terminates whenever
    either side is finite. Results keep the order of `xs` when it is finite.
    """
    if not is_infinite(xs) and not is_infinite(ys):
        return pvector(_intersect_finite(xs, ys))
    xp, xc = _parts(xs)
    yp, yc = _parts(ys)
    cycle = [x for x in xc if x in yc]
    prefix = [x for x in xp if x in yc and x not in xc]
    prefix += [y for y in yp if y in xc and y not in yc]
    prefix += _intersect_finite(
        [x for x in xp if x not in xc and x not in yc],
        [y for y in yp if y not in xc and y not in yc])
    return _cycled(prefix, cycle)

def apply(fs, xs):
    """Apply every function of `fs` to every value of `xs`."""
    if not is_infinite(fs) and not is_infinite(xs):
        return pvector(f(x) for f in fs for x in xs)
    fp, fc = _parts(fs)
    xp, xc = _parts(xs)
    prefix = [f(x) for f in fp for x in xp]
    # Any pairing with an infinitely repeated side repeats infinitely.
    cycle = [f(x) for f in fp for x in xc]
    cycle += [f(x) for f in fc for x in xp]
    cycle += [f(x) for f in fc for x in xc]
    return _cycled(prefix, cycle)

def map_container(g, xs):
    """Replace a whole container by `g(xs)`.

    For an infinite container `g` is applied to the prefix and to the cycle
    separately, which is exact for element-wise functions.
    """
    if is_infinite(xs):
        return _cycled(pvector(g(xs.prefix)), pvector(g(xs.cycle)))
    return pvector(g(xs))

def equal(xs, ys):
    if is_infinite(xs) != is_infinite(ys):
        return False
    xp, xc = _parts(xs)
    yp, yc = _parts(ys)
    if not all(x in yc for x in xc) or not all(y in xc for y in yc):
        return False
    xp = [x for x in xp if x not in xc]
    yp = [y for y in yp if y not in yc]
    return len(xp) == len(yp) and len(_intersect_finite(xp, yp)) == len(xp)
