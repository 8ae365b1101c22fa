"""
Password hashing (Argon2 via passlib) and access tokens (PyJWT, HS256).

Tokens carry the account id in `sub` and the role the account logged in
with in `role`; they expire after ACCESS_TOKEN_EXPIRE_MINUTES (7 days
unless overridden in the environment).
"""
import os
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")  # override outside development
JWT_ALG = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Check a password against its stored hash.
    A malformed or empty hash is a mismatch rather than an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False

def create_access_token(user_id: str, role: str) -> str:
    """
    Issue a signed token for `user_id`.

    Payload: sub, role, iat, exp (all times UTC).
    """
    issued = dt.datetime.now(dt.timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role,
        "iat": issued,
        "exp": issued + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises:
        jwt.ExpiredSignatureError: token is past its `exp`
        jwt.InvalidTokenError: anything else wrong with the token
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
