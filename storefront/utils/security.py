# storefront/utils/security.py
"""
Password hashing for the user directory.

Hashes are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>`` so
the iteration count can be raised later without invalidating old records.
"""
import hashlib
import hmac
import secrets

from storefront.utils.settings import PASSWORD_HASH_ITERATIONS

_ALGORITHM = "pbkdf2_sha256"
_SALT_BYTES = 16


def _digest(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str, iterations: int | None = None) -> str:
    iterations = iterations or PASSWORD_HASH_ITERATIONS
    salt = secrets.token_bytes(_SALT_BYTES)
    digest = _digest(password, salt, iterations)
    return f"{_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False

    if algorithm != _ALGORITHM:
        return False

    candidate = _digest(password, bytes.fromhex(salt_hex), int(iterations))
    return hmac.compare_digest(candidate.hex(), digest_hex)
