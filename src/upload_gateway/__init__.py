"""Upload gateway: validate, name and sync single-file uploads to a static host."""

__version__ = "0.1.0"
