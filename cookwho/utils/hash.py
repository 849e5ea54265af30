from passlib.context import CryptContext
from cookwho.utils.logger import get_logger
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

logger = get_logger("HASH_UTILS")

def _truncate(password: str) -> str:
    # bcrypt only reads the first 72 bytes
    return password.encode("utf-8")[:72].decode("utf-8", errors="ignore")

def hash_password(password: str) -> str:
    logger.debug("Password received for hashing")
    return pwd_context.hash(_truncate(str(password)))

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate(plain_password), hashed_password)
