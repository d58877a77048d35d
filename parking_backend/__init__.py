"""Smart parking backend: search, AI assistant, auth and bookings API."""

__version__ = "1.0.0"
