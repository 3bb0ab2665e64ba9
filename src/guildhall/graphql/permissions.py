"""
Permission classes guarding GraphQL fields
"""

from typing import Any

import strawberry
from strawberry.permission import BasePermission

from ..logging import get_logger

logger = get_logger(__name__)


class IsAuthenticated(BasePermission):
    """Reject operations whose request did not carry a verified token."""

    message = "Unauthorized"
    error_extensions = {"code": "UNAUTHENTICATED", "status": 401}

    def has_permission(self, source: Any, info: strawberry.Info, **kwargs: Any) -> bool:
        auth = info.context.get("auth")
        if auth is None or not auth.is_authenticated:
            logger.info("Unauthenticated GraphQL access", field=info.field_name)
            return False
        return True
