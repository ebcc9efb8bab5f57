"""fittrack: cascade-delete accounting and training analytics."""

__version__ = "0.1.0"
