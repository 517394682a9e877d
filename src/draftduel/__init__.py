"""Head-to-head fantasy draft engine and API."""

__version__ = "0.1.0"
