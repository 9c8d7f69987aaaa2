"""Short code candidates.

Codes use the Base62 alphabet (a-z, A-Z, 0-9). Nothing here checks the
store; UniqueCodeResolver decides whether a candidate is free.
"""

import hashlib
import secrets
import string
from typing import Optional

BASE62_CHARS = string.ascii_letters + string.digits


def encode_base62(num: int) -> str:
    """Base62 digits of a non-negative integer, most significant first."""
    if num == 0:
        return BASE62_CHARS[0]

    digits = []
    while num:
        num, remainder = divmod(num, len(BASE62_CHARS))
        digits.append(BASE62_CHARS[remainder])
    return "".join(reversed(digits))


class ShortCodeGenerator:
    """Produces candidate codes of a configured length."""

    BASE62_CHARS = BASE62_CHARS

    def __init__(self, default_length: int = 6):
        if default_length < 1:
            raise ValueError(f"Short code length must be positive (given: {default_length})")
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Uniformly random code from a CSPRNG."""
        length = length or self.default_length
        return "".join(secrets.choice(BASE62_CHARS) for _ in range(length))

    def generate_from_url(self, url: str, length: Optional[int] = None) -> str:
        """Deterministic code: leading Base62 digits of the URL's SHA-256.

        Different URLs may share a code; the resolver falls back to random
        candidates when this one is taken.
        """
        length = length or self.default_length
        digest = int(hashlib.sha256(url.encode("utf-8")).hexdigest(), 16)
        # A SHA-256 gives about 43 digits; pad for longer requests
        return encode_base62(digest)[:length].rjust(length, BASE62_CHARS[0])

    @staticmethod
    def is_valid_format(code: str) -> bool:
        return bool(code) and all(c in BASE62_CHARS for c in code)
