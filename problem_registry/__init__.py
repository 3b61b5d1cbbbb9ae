"""Problem Registry: an HTTP service for reporting and tracking community problems."""

__version__ = "1.0.0"
