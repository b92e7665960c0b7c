"""Identity resolution: who is calling, and in which role.

Provides get_resolver() / set_resolver() to swap implementations. The JWT
resolver is the default; tests may install one with a known secret.
"""

import os

from marketplace.identity.model import (
    AuthenticationError,
    AuthorizationError,
    Customer,
    Identity,
    Role,
    ShopOwner,
)
from marketplace.identity.port import IdentityResolver

_current_resolver: IdentityResolver | None = None


def get_resolver() -> IdentityResolver:
    """Return the configured identity resolver (singleton).

    Configure with the IDENTITY_RESOLVER environment variable.
    """
    global _current_resolver
    if _current_resolver is None:
        adapter = os.environ.get("IDENTITY_RESOLVER", "jwt")
        if adapter == "jwt":
            from marketplace.identity.jwt_adapter import JWTIdentityResolver

            _current_resolver = JWTIdentityResolver()
        else:
            raise ValueError(f"Unknown identity resolver: {adapter}")
    return _current_resolver


def set_resolver(resolver: IdentityResolver) -> None:
    """Override the active identity resolver."""
    global _current_resolver
    _current_resolver = resolver


def reset_resolver() -> None:
    """Reset to the default resolver."""
    global _current_resolver
    _current_resolver = None


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "Customer",
    "Identity",
    "IdentityResolver",
    "Role",
    "ShopOwner",
    "get_resolver",
    "reset_resolver",
    "set_resolver",
]
