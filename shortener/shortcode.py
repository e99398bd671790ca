"""Short codes: base62 strings derived from the long URL, with random fallback."""

import hashlib
import random
import string
from typing import Iterator, Optional


ALPHABET = string.ascii_letters + string.digits
# User-chosen codes may also use '-' and '_'
CUSTOM_CODE_CHARS = frozenset(ALPHABET + "-_")


def to_base62(num: int) -> str:
    digits = []
    while True:
        num, remainder = divmod(num, len(ALPHABET))
        digits.append(ALPHABET[remainder])
        if num == 0:
            return "".join(reversed(digits))


def is_well_formed(code: str) -> bool:
    """True if code is non-empty and only holds letters, digits, '-' or '_'."""
    return bool(code) and set(code) <= CUSTOM_CODE_CHARS


class ShortCodeGenerator:
    """Issues fixed-length base62 codes."""

    def __init__(self, length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            length: Length of every generated code
            rng: Random source for fallback codes (seed it in tests)
        """
        self.length = length
        self._rng = rng or random.Random()

    def hashed(self, url: str, salt: int = 0) -> str:
        """Code derived from the URL. The same URL and salt give the same code."""
        seed = url if salt == 0 else f"{url}#{salt}"
        digest = hashlib.sha256(seed.encode("utf-8")).digest()
        return to_base62(int.from_bytes(digest, "big"))[: self.length]

    def random(self) -> str:
        return "".join(self._rng.choices(ALPHABET, k=self.length))

    def candidates(self, url: str, retries: int) -> Iterator[str]:
        """Codes to try for url, in order.

        The plain hash first, then `retries` salted hashes, then `retries`
        random codes.
        """
        yield self.hashed(url)
        for salt in range(1, retries + 1):
            yield self.hashed(url, salt)
        for _ in range(retries):
            yield self.random()
