"""covexport: concurrent coverage report aggregation and export."""

__version__ = "0.1.0"
