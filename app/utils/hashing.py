from functools import lru_cache

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from pwdlib.hashers.bcrypt import BcryptHasher

from app.core.config import get_settings


@lru_cache
def get_password_hasher() -> PasswordHash:
    rounds = get_settings().password_hash_rounds
    return PasswordHash((BcryptHasher(rounds=rounds),))


def get_password_hash(password: str) -> str:
    return get_password_hasher().hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return get_password_hasher().verify(plain_password, hashed_password)
    except UnknownHashError:
        # unknown / corrupted hash format
        return False
