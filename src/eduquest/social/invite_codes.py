"""Invite code generation for study groups.

Codes are 8-character alphanumeric (A-Z, 0-9), generated server-side
with a cryptographic random source.
"""

from __future__ import annotations

import secrets
import string

from eduquest.storage.base import Storage

INVITE_CHARSET = string.ascii_uppercase + string.digits
INVITE_LENGTH = 8
MAX_ATTEMPTS = 10


def generate_invite_code() -> str:
    return "".join(secrets.choice(INVITE_CHARSET) for _ in range(INVITE_LENGTH))


def normalize_invite_code(code: str) -> str:
    """Invite codes are matched case-insensitively and ignore surrounding whitespace."""
    return code.strip().upper()


async def generate_unique_invite_code(storage: Storage) -> str:
    """Generate an invite code no existing group uses."""
    for _ in range(MAX_ATTEMPTS):
        code = generate_invite_code()
        if await storage.get_group_by_invite_code(code) is None:
            return code
    raise RuntimeError(f"Failed to generate unique invite code after {MAX_ATTEMPTS} attempts")
