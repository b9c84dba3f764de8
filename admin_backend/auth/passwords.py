import bcrypt

# bcrypt only reads the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Compare ``password`` against a stored bcrypt hash.

    Raises ``ValueError`` when the stored hash is not a bcrypt hash.
    """
    return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
