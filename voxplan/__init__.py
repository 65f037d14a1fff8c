"""Voice brief to essay outline service."""

__version__ = "1.0.0"
