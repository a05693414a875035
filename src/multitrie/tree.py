class Tree:
    """A rose tree of display strings, as produced by `MultiTrie.to_tree`."""

    def __init__(self, root, children=()):
        self.root = root
        self.children = list(children)

    def __eq__(self, x):
        if isinstance(x, Tree):
            return self.root == x.root and self.children == x.children
        return False

    def __repr__(self):
        return 'Tree(%r, %r)' % (self.root, self.children)


def _shift(first, other, lines):
    return [(first if i == 0 else other) + line for i, line in enumerate(lines)]

def _draw(tree):
    lines = str(tree.root).split('\n')
    for i, child in enumerate(tree.children):
        lines.append('|')
        if i == len(tree.children) - 1:
            lines.extend(_shift('`- ', '   ', _draw(child)))
        else:
            lines.extend(_shift('+- ', '|  ', _draw(child)))
    return lines

def draw_tree(tree):
    """Render `tree` as ASCII art, one node per line:

        []
        |
        `- 'a'
           |
           `- [1, 1]
    """
    return '\n'.join(_draw(tree))
