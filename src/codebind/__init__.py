"""Server-side Proof Key for Code Exchange (RFC 7636) for OAuth 2.0."""

__version__ = "0.1.0"
