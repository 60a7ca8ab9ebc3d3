"""Login, session resolution and logout on top of stateless signed tokens."""

import logging
from datetime import UTC, datetime
from functools import lru_cache

from sqlalchemy.orm import Session

from bugtracker.core.errors import (
    AccountInactive,
    InvalidCredentials,
    TokenError,
    TokenInvalidated,
    UserNotFound,
)
from bugtracker.core.revocation import RevocationRegistry, revocation_registry
from bugtracker.core.security import hash_password, verify_password
from bugtracker.core.tokens import TokenCodec, get_token_codec
from bugtracker.models import User
from bugtracker.schemas.auth import AuthResponse, LogoutResponse
from bugtracker.schemas.user import UserPublic

logger = logging.getLogger(__name__)


@lru_cache
def _placeholder_hash() -> str:
    """Digest checked for unknown usernames so both rejection paths cost one hash."""
    return hash_password("placeholder-password")


class AuthService:
    """
    Orchestrates the credential hasher, token codec and revocation registry.

    A token is either live, expired (checked on every verification) or
    revoked (present in the registry). The registry is consulted first, so a
    logged-out token fails with TokenInvalidated even while its signature and
    expiry are still good.
    """

    def __init__(self, codec: TokenCodec, registry: RevocationRegistry) -> None:
        self.codec = codec
        self.registry = registry

    def login(self, db: Session, username: str, password: str) -> AuthResponse:
        """
        Check credentials, stamp last_login and issue a token.

        Unknown username and wrong password both raise InvalidCredentials.
        """
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            verify_password(password, _placeholder_hash())
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()
        if not user.is_active:
            logger.info("Login rejected: inactive account", extra={"user_id": user.id})
            raise AccountInactive()
        if not verify_password(password, user.password_hash):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()

        user.last_login = datetime.now(UTC)
        db.commit()
        db.refresh(user)

        token = self.codec.issue(subject=user.id, username=user.username, role=user.role)
        logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
        return AuthResponse(user=UserPublic.model_validate(user), token=token)

    def resolve_session(self, db: Session, token: str) -> UserPublic:
        """
        Return the user a token belongs to.

        Raises TokenInvalidated, MalformedToken, InvalidSignature, TokenExpired,
        UserNotFound or AccountInactive.
        """
        if self.registry.is_revoked(token):
            raise TokenInvalidated()
        claims = self.codec.verify(token)
        user = db.get(User, claims.subject)
        if user is None:
            raise UserNotFound()
        if not user.is_active:
            raise AccountInactive()
        return UserPublic.model_validate(user)

    def logout(self, token: str) -> LogoutResponse:
        """Revoke the raw token string. Always succeeds, even for stale or garbage tokens."""
        try:
            claims = self.codec.verify(token)
        except TokenError as e:
            logger.info("Logout with unverifiable token", extra={"reason": e.kind})
        else:
            logger.info("Logout", extra={"user_id": claims.subject})
        self.registry.revoke(token)
        return LogoutResponse(success=True)


def get_auth_service() -> AuthService:
    """Dependency returning the service wired to the process-wide codec and registry."""
    return AuthService(get_token_codec(), revocation_registry)
