"""LeaderLens — interview video catalog, annotation and theme analytics."""

__version__ = "0.1.0"
