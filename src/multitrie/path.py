class Path:
    """A finite sequence of labels identifying a multi-trie node by descent
    from the root. The empty path identifies the root itself."""

    def __init__(self, *labels):
        self.labels = tuple(labels)

    def first(self):
        if not self:
            raise RuntimeError('Empty Path has no first() label.')
        return self.labels[0]

    def rest(self):
        if not self:
            raise RuntimeError('Empty Path has no rest() path.')
        return Path(*self.labels[1:])

    def __bool__(self):
        return bool(self.labels)

    def __len__(self):
        return len(self.labels)

    def __iter__(self):
        return iter(self.labels)

    def __add__(self, x):
        if isinstance(x, Path):
            return Path(*self.labels, *x.labels)
        if isinstance(x, tuple):
            return Path(*self.labels, *x)
        return NotImplemented

    def __radd__(self, x):
        if isinstance(x, tuple):
            return Path(*x, *self.labels)
        return NotImplemented

    def __eq__(self, x):
        if isinstance(x, type(self)):
            return self.labels == x.labels
        return False

    def __lt__(self, x):
        if isinstance(x, type(self)):
            return self.labels < x.labels
        return NotImplemented

    def __repr__(self):
        x = ', '.join(repr(x) for x in self.labels)
        return 'path(%s)' % (x,)

    def __str__(self):
        return self.__repr__()

    def __hash__(self):
        return hash(self.labels)

path = Path

def pathify(x):
    if isinstance(x, Path):
        return x
    if isinstance(x, (tuple, list)):
        return path(*x)
    return path(x)
