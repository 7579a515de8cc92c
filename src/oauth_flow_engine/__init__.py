"""OAuth / OIDC flow definition engine."""

__version__ = "1.0.0"
