"""Security utilities - password hashing and invitation token codec.

Re-exports all security-related functions for convenience.
"""

from src.tenant_invites.core.security.crypto import hash_password, verify_password
from src.tenant_invites.core.security.tokens import (
    TOKEN_BYTES,
    TOKEN_PREFIX_LENGTH,
    MintedToken,
    mint_invite_token,
    token_prefix,
    verify_invite_token,
)

__all__ = [
    # Passwords
    "hash_password",
    "verify_password",
    # Invitation tokens
    "TOKEN_BYTES",
    "TOKEN_PREFIX_LENGTH",
    "MintedToken",
    "mint_invite_token",
    "token_prefix",
    "verify_invite_token",
]
