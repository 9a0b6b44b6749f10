import bcrypt

from backend.core import config

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHashingError(Exception):
    """Raised when a password cannot be hashed."""


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    try:
        salt = bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
    except (TypeError, ValueError) as exc:
        raise PasswordHashingError("Unable to hash password") from exc
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False
