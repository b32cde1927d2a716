import logging
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from app.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from app.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

# passlib context verifies hashes written by older deployments;
# new hashes go through bcrypt directly
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def _truncate_password(password: str) -> bytes:
    """Truncate to bcrypt's 72-byte limit without splitting a UTF-8 character."""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) <= 72:
        return password_bytes

    logger.warning("Password exceeds 72 bytes, truncating before hashing (validation should have caught this)")
    truncated = password_bytes[:72]
    # Drop a partial trailing character (UTF-8 char is max 4 bytes)
    for i in range(0, 4):
        try:
            return truncated[:len(truncated) - i].decode('utf-8').encode('utf-8')
        except UnicodeDecodeError:
            continue
    return truncated.decode('utf-8', errors='ignore').encode('utf-8')


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt directly.

    Args:
        password: Plain text password (max 72 bytes in UTF-8)

    Returns:
        Hashed password string (bcrypt format compatible with passlib)

    Raises:
        ValueError: If password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_truncate_password(password), bcrypt.gensalt()).decode('utf-8')
    except (ValueError, TypeError) as e:
        logger.error(f"Password hashing failed: {e}")
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Supports both bcrypt-native hashes and passlib-wrapped hashes.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_truncate_password(password), hashed.encode('utf-8'))
    except (ValueError, TypeError):
        try:
            return pwd_context.verify(password, hashed)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification failed: {e}")
            return False


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Validate a bearer token and return its subject (the user id).

    Raises:
        AuthenticationError: token missing, malformed, expired or without subject
    """
    if not token:
        raise AuthenticationError("Missing credential")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected token: {e}")
        raise AuthenticationError("Invalid or expired credential") from e

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid credential")
    return str(subject)
