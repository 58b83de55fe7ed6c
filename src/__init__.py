"""imgresizer: on-demand image transformation with a memoizing result cache."""

from imgresizer.version import __version__

__all__ = ["__version__"]
