"""
Guildhall Backend
GraphQL API for chat servers, channels, invites and members
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
