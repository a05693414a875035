"""Configuration for rendering multi-tries."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DrawConfig:
    """Options for `MultiTrie.to_tree` and `MultiTrie.draw`."""

    # Number of label levels to render; None renders everything, which
    # only works for finite tries.
    max_depth: Optional[int] = None

    # Placeholder rendered in place of the children cut off by max_depth.
    elision: str = "..."

    def deeper(self) -> "DrawConfig":
        """The configuration for the level below this one."""
        if self.max_depth is None:
            return self
        return DrawConfig(max_depth=self.max_depth - 1, elision=self.elision)

    def exhausted(self) -> bool:
        return self.max_depth is not None and self.max_depth <= 0


# Global configuration instance
DRAW_CONFIG = DrawConfig()
