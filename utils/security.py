# utils/security.py
import hashlib

from passlib.context import CryptContext

# mpins are short, so they get a salted, iterated hash
mpin_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Unsalted SHA-256 hex digest; the same input always yields the same digest"""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_mpin(mpin: str) -> str:
    return mpin_context.hash(mpin)


def verify_mpin(mpin: str, mpin_hash: str) -> bool:
    """Constant-time check of a submitted mpin against the stored hash"""
    try:
        return mpin_context.verify(mpin, mpin_hash)
    except (ValueError, TypeError):
        return False
