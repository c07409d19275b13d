from __future__ import annotations
import logging
from typing import Optional

import bcrypt

from .errors import HashingFailed, VerificationError

logger = logging.getLogger("authservice.hashing")

# bcrypt only looks at the first 72 bytes of its input.
MAX_INPUT_BYTES = 72


class CredentialHasher:
    """
    bcrypt hasher for passwords and security answers.
    The salt and work factor travel inside the encoded hash, so `verify`
    needs nothing but the stored value.
    """
    def __init__(self, rounds: int = 10):
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    def hash(self, plaintext: str) -> str:
        raw = plaintext.encode("utf-8")
        if len(raw) > MAX_INPUT_BYTES:
            raise HashingFailed(f"input longer than {MAX_INPUT_BYTES} bytes")
        try:
            hashed = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError) as ex:
            logger.warning("hashing.failed", extra={"error_type": type(ex).__name__})
            raise HashingFailed(str(ex)) from ex
        return hashed.decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            raise VerificationError("Empty hash")
        raw = plaintext.encode("utf-8")
        if len(raw) > MAX_INPUT_BYTES:
            raise VerificationError(f"input longer than {MAX_INPUT_BYTES} bytes")
        try:
            return bcrypt.checkpw(raw, hashed.encode("utf-8"))
        except (ValueError, TypeError) as ex:
            raise VerificationError(str(ex)) from ex

    def dummy_verify(self, plaintext: str) -> bool:
        # Same CPU cost as a real check for lookups that found no user.
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=self.rounds))
        raw = plaintext.encode("utf-8")[:MAX_INPUT_BYTES]
        bcrypt.checkpw(raw, self._dummy_hash)
        return False
