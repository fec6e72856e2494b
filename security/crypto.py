"""
Approved cryptographic primitives.

Passwords are hashed with bcrypt (salted, adaptive cost). Tokens, keys and
security-relevant identifiers come from the OS CSPRNG via ``secrets``.
The forbidden list is what security.static_rules enforces against the code.
"""

import logging
import secrets

import bcrypt

from app.config import settings
from app.exceptions import WeakPrimitiveError

logger = logging.getLogger("mealplanner.security.crypto")

APPROVED_PRIMITIVES = {
    "password_hash": ("bcrypt", "argon2id", "scrypt", "pbkdf2-sha256"),
    "digest": ("sha256", "sha384", "sha512", "sha3_256", "blake2b"),
    "cipher": ("aes-gcm", "chacha20-poly1305"),
    "rng": ("secrets", "os.urandom"),
}

FORBIDDEN_PRIMITIVES = {
    "md5": "broken hash",
    "sha1": "broken hash",
    "des": "broken cipher",
    "3des": "deprecated cipher",
    "rc4": "broken cipher",
    "aes-ecb": "insecure cipher mode",
    "sha256-unsalted": "fast unsalted hash is not a password hash",
    "random": "statistical generator, predictable",
    "random-seeded": "fixed seed makes output reproducible",
}

# bcrypt only reads the first 72 bytes of input; longer passwords are refused
BCRYPT_MAX_BYTES = 72


def check_primitive(name: str) -> str:
    """
    Validate a configured primitive name.

    Raises:
        WeakPrimitiveError: the name is on the forbidden list
    """
    normalized = name.strip().lower()
    if normalized in FORBIDDEN_PRIMITIVES:
        raise WeakPrimitiveError(
            f"Primitive '{name}' is forbidden: {FORBIDDEN_PRIMITIVES[normalized]}"
        )
    return normalized


def hash_password(password: str, rounds: int = None) -> str:
    """
    Hash a password with bcrypt; each call uses a fresh salt.

    Raises:
        ValueError: the password is empty or longer than 72 UTF-8 bytes
    """
    if not password:
        raise ValueError("password must not be empty")
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash; malformed hashes and over-long inputs never match."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Rejected malformed password hash")
        return False


def random_bytes(n: int) -> bytes:
    """Return n bytes from the OS CSPRNG."""
    if n <= 0:
        raise ValueError("n must be positive")
    return secrets.token_bytes(n)


def generate_token(n: int = 32) -> str:
    """URL-safe token with n bytes of entropy, for API keys and reset links."""
    if n < 16:
        raise ValueError("tokens need at least 16 bytes of entropy")
    return secrets.token_urlsafe(n)


def constant_time_equals(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
