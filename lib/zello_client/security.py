from __future__ import annotations

import hashlib
import random
import string
import time

NONCE_ALPHABET = string.ascii_lowercase + string.digits
NONCE_LENGTH = 32

# Seeded once from the wall clock (microseconds); later tokens continue the
# same stream so two calls in the same instant still differ.
_rng = random.Random(time.time_ns() // 1000)


def make_nonce(length: int = NONCE_LENGTH) -> str:
    """Cache-busting token for the ``rnd`` query parameter. Not a secret."""
    return "".join(_rng.choice(NONCE_ALPHABET) for _ in range(length))


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    """Password form expected by ``user/save``."""
    return md5_hex(password)


def password_digest(password: str, token: str, api_key: str) -> str:
    """Login digest: md5(md5(password) + token + api_key), lowercase hex."""
    return md5_hex(md5_hex(password) + token + api_key)
