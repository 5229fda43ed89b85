import logging
import random
import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from shortlinks.core.errors import Conflict, Exhausted, InvalidInput

# Lowercase only for case-insensitive URLs; 0/o, 1/l/i dropped as look-alikes
ALPHABET = "23456789abcdefghjkmnpqrstuvwxyz"
SHORT_CODE_LENGTH = 6
MAX_ATTEMPTS = 10

VANITY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Top-level paths served by the app itself; a link there could never redirect
RESERVED_CODES = frozenset({"health", "docs", "redoc", "openapi.json", "media", "api"})


def normalize_short_code(code: str) -> str:
    """Normalize short code to lowercase for case-insensitive lookups."""
    return code.lower().strip()


@dataclass(frozen=True)
class VanityCode:
    code: str


@dataclass(frozen=True)
class GeneratedCode:
    pass


CodeRequest = Union[VanityCode, GeneratedCode]


def code_request(vanity: Optional[str], max_length: int = 32) -> CodeRequest:
    """Turn an optional caller-supplied vanity into a code request.

    Blank vanities count as absent. Non-blank ones must be made of letters,
    digits, '-' or '_' and fit in ``max_length`` characters. Names of the
    app's own top-level routes are already taken and raise ``Conflict``.
    """
    if vanity is None or not vanity.strip():
        return GeneratedCode()

    candidate = vanity.strip()
    if len(candidate) > max_length:
        raise InvalidInput(f"vanity must be {max_length} characters or less")
    if not VANITY_PATTERN.match(candidate):
        raise InvalidInput("vanity may only contain letters, digits, '-' and '_'")
    code = normalize_short_code(candidate)
    if code in RESERVED_CODES:
        raise Conflict(f"'{code}' is reserved and cannot be used as a short code")
    return VanityCode(code)


class CodeGenerator:
    """Random short codes checked against an existence callback."""

    def __init__(
        self,
        rng: random.Random,
        length: int = SHORT_CODE_LENGTH,
        max_attempts: int = MAX_ATTEMPTS,
        alphabet: str = ALPHABET,
        logger: Optional[logging.Logger] = None,
    ):
        self.rng = rng
        self.length = length
        self.max_attempts = max_attempts
        self.alphabet = alphabet
        self.logger = logger or logging.getLogger(__name__)

    def candidate(self) -> str:
        return ''.join(self.rng.choice(self.alphabet) for _ in range(self.length))

    def generate(self, exists: Callable[[str], bool]) -> str:
        for attempt in range(self.max_attempts):
            short_code = self.candidate()
            if not exists(short_code):
                return short_code
            self.logger.info(
                "Short code collision on attempt %d/%d: %s", attempt + 1, self.max_attempts, short_code
            )

        self.logger.error("Short code space looks saturated (length=%d)", self.length)
        raise Exhausted(f"Failed to generate unique short code after {self.max_attempts} attempts")
