"""formatcache: tiered template resolution with a weighted content cache."""

__version__ = "0.1.0"
