"""
cert_tracker — TLS certificate tracker.

Connects to HTTPS endpoints, reads the leaf certificate the server presents,
extracts subject, issuer and validity window, and keeps the results in
PostgreSQL behind a small REST API.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
