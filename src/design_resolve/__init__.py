"""design-resolve: note lookup for outline documents."""

__version__ = "0.1.0"
