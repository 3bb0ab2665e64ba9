"""Authentication adapters."""

from .base import AuthAdapter, AuthenticationError, Principal
from .jwt import JWTAuthAdapter
from .none import NoAuthAdapter

__all__ = ["AuthAdapter", "AuthenticationError", "JWTAuthAdapter", "NoAuthAdapter", "Principal"]
