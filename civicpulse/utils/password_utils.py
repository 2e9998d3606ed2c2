# Third-party imports
import bcrypt

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """
    Hash a password with a fresh salt.
    """
    hashed_password = bcrypt.hashpw(password=_encode(password), salt=bcrypt.gensalt())
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plain text password against its stored hash.
    """
    try:
        return bcrypt.checkpw(password=_encode(plain_password), hashed_password=hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
