"""Factory for creating auth adapters based on configuration."""

from __future__ import annotations

import json
import os

from ..config import settings
from .adapters.base import AuthAdapter
from .adapters.jwt import JWTAuthAdapter
from .adapters.none import NoAuthAdapter


def get_auth_adapter() -> AuthAdapter:
    """Create and return the configured auth adapter."""
    provider = os.getenv("GUILDHALL_AUTH_PROVIDER", settings.auth_provider)
    config_str = os.getenv("GUILDHALL_AUTH_CONFIG")

    if config_str is None:
        config = dict(settings.auth_config)
    else:
        try:
            config = json.loads(config_str)
        except json.JSONDecodeError:
            config = {}

    if provider == "none":
        return NoAuthAdapter(
            default_subject=config.get("default_subject", "dev-user"),
            default_email=config.get("default_email", "dev@example.com"),
            default_name=config.get("default_name", "Development User"),
        )

    elif provider == "jwt":
        secret_key = (
            config.get("secret_key") or os.getenv("GUILDHALL_JWT_SECRET") or settings.jwt_secret
        )
        if not secret_key:
            raise ValueError(
                "JWT secret key is required. Set GUILDHALL_JWT_SECRET or provide in config."
            )

        return JWTAuthAdapter(
            secret_key=secret_key,
            algorithm=config.get("algorithm", settings.jwt_algorithm),
            issuer=config.get("issuer", "guildhall"),
            audience=config.get("audience", "guildhall-api"),
        )

    else:
        raise ValueError(f"Unsupported auth provider: {provider}")
