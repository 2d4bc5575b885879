"""Point-in-time tree imports from an external tree or repository."""

__version__ = "0.3.0"
