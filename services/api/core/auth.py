# services/api/core/auth.py
"""
Shared-password login and bearer tokens for write endpoints.

There are no users: anyone with the password gets a token, and any live
token may call any write endpoint. Tokens live in process memory only and
expire after a fixed TTL.
"""
from __future__ import annotations

import hmac
import logging
import secrets
from typing import Optional, Protocol

from cachetools import TTLCache
from fastapi import Request

from core.errors import Unauthorized

logger = logging.getLogger(__name__)


class CredentialCheck(Protocol):
    """Anything that can say yes/no to a submitted password."""

    def verify(self, password: str) -> bool:
        ...


class StaticPasswordCheck:
    """Compare against one configured password."""

    def __init__(self, secret: str) -> None:
        self._secret = secret or ""

    def verify(self, password: str) -> bool:
        if not self._secret or not password:
            return False
        return hmac.compare_digest(password.encode("utf-8"), self._secret.encode("utf-8"))


class TokenStore:
    """Set of live tokens; each entry expires `ttl_seconds` after issue.

    `maxsize` bounds memory; past it the oldest live token is dropped
    early, so keep it well above the logins expected within one TTL.
    """

    def __init__(self, ttl_seconds: float = 24 * 60 * 60, maxsize: int = 100_000, timer=None) -> None:
        kwargs = {"timer": timer} if timer is not None else {}
        self._tokens: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, **kwargs)

    def issue(self) -> str:
        token = secrets.token_hex(32)
        self._tokens[token] = True
        return token

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return token in self._tokens

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    def __len__(self) -> int:
        return len(self._tokens)


class Authenticator:
    def __init__(self, check: CredentialCheck, store: TokenStore) -> None:
        self.check = check
        self.store = store

    def authenticate(self, password: Optional[str]) -> str:
        if not password or not self.check.verify(password):
            logger.warning("Rejected login attempt")
            raise Unauthorized("Wrong password")
        return self.store.issue()

    def authorize(self, token: Optional[str]) -> None:
        if not token:
            raise Unauthorized("You need to log in to edit")
        if not self.store.is_valid(token):
            raise Unauthorized("Invalid token. Please log in again.")


def bearer_token(request: Request) -> Optional[str]:
    """Token from `Authorization: Bearer <token>`, if any."""
    header = request.headers.get("authorization", "")
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def require_token(request: Request) -> str:
    """FastAPI dependency guarding write endpoints."""
    token = bearer_token(request)
    get_authenticator(request).authorize(token)
    return token
