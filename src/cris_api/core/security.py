"""Password hashing primitives.

Uses passlib with bcrypt. The work factor defaults to 12 rounds; hashes are
salted so the same plaintext never produces the same stored value twice.
"""

from passlib.context import CryptContext

from cris_api.core.exceptions import HashingError

DEFAULT_BCRYPT_ROUNDS = 12

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=DEFAULT_BCRYPT_ROUNDS)


def configure_hashing(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
    """Set the bcrypt work factor used by :func:`hash_password`.

    Args:
        rounds: bcrypt cost factor (log2 of the iteration count).
    """
    pwd_context.update(bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt.

    Args:
        password: The plaintext password to hash.

    Returns:
        The bcrypt-hashed password string.

    Raises:
        HashingError: If the bcrypt backend fails.
    """
    try:
        return pwd_context.hash(password)
    except Exception as e:
        msg = f"Password hashing failed: {type(e).__name__}"
        raise HashingError(msg) from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash.

    A mismatch, an empty hash, or a hash in an unrecognised format all
    verify as False.

    Args:
        plain_password: The plaintext password to verify.
        hashed_password: The bcrypt hash to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError):
        return False


def is_password_hash(value: str | None) -> bool:
    """Return True if ``value`` is a well-formed hash produced by :data:`pwd_context`.

    The hash prefix alone is not enough: ``"$2b$hunter2"`` carries a bcrypt
    ident and nothing else, so the full string is parsed.
    """
    if not value:
        return False
    handler = pwd_context.identify(value, resolve=True)
    if handler is None:
        return False
    try:
        parsed = handler.from_string(value)
    except (TypeError, ValueError):
        return False
    # A salt-only config string parses too but holds no checksum.
    return parsed.checksum is not None
