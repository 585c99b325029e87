"""Invitation token codec.

Raw tokens are 32 random bytes, hex-encoded (64 characters). Only an
Argon2id hash of the full token is persisted, alongside the first 8 hex
characters as a lookup prefix. The prefix narrows the candidate set on
accept; it is never sufficient on its own, every candidate still goes
through a full hash verification.
"""

import secrets
from typing import NamedTuple

import argon2

from src.tenant_invites.core.security.crypto import create_hasher

TOKEN_BYTES = 32
TOKEN_PREFIX_LENGTH = 8

_token_hasher = create_hasher()


class MintedToken(NamedTuple):
    """A freshly generated token. Only ``token_hash`` and ``prefix`` may be stored."""

    raw: str
    token_hash: str
    prefix: str

    def __repr__(self) -> str:
        return f"MintedToken(prefix={self.prefix!r})"


def token_prefix(raw_token: str) -> str:
    """Return the clear-text lookup prefix for a raw token."""
    return raw_token[:TOKEN_PREFIX_LENGTH]


def mint_invite_token() -> MintedToken:
    """Generate a new invitation token with its hash and lookup prefix."""
    raw = secrets.token_hex(TOKEN_BYTES)
    return MintedToken(raw=raw, token_hash=_token_hasher.hash(raw), prefix=token_prefix(raw))


def verify_invite_token(raw_token: str, token_hash: str) -> bool:
    """Check a raw token against a stored hash using Argon2's own verify.

    Returns False on mismatch or on a malformed stored hash.
    """
    try:
        return _token_hasher.verify(token_hash, raw_token)
    except argon2.exceptions.VerificationError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False
