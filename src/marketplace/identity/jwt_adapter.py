"""JWT identity resolver backed by python-jose.

Tokens carry ``sub`` (identity id), ``role`` and optionally ``ext`` (the
ration-card or license id the account registered with).
"""

import os
from datetime import UTC, datetime, timedelta

import structlog
from jose import JWTError, jwt

from marketplace.identity.model import AuthenticationError, Identity, identity_for
from marketplace.identity.port import IdentityResolver

logger = structlog.get_logger(__name__)

_DEV_SECRET = "marketplace-dev-secret"


class JWTIdentityResolver(IdentityResolver):
    """Verifies signed bearer tokens."""

    def __init__(self, secret: str | None = None, algorithm: str | None = None, ttl_minutes: int = 60 * 24 * 7):
        self.secret = secret or os.environ.get("MARKETPLACE_JWT_SECRET", _DEV_SECRET)
        self.algorithm = algorithm or os.environ.get("MARKETPLACE_JWT_ALGORITHM", "HS256")
        self.ttl = timedelta(minutes=ttl_minutes)

    def issue_token(self, identity: Identity, external_id: str | None = None) -> str:
        """Sign a token for ``identity``. Used by development tooling and tests."""
        now = datetime.now(UTC)
        claims = {
            "sub": identity.id,
            "role": identity.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        if external_id:
            claims["ext"] = external_id
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def resolve(self, token: str) -> Identity:
        if not token:
            raise AuthenticationError("No token provided")

        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.info("token_rejected", reason=str(exc))
            raise AuthenticationError("Invalid or expired token") from exc

        return identity_for(claims.get("sub"), claims.get("role"), claims.get("ext"))
