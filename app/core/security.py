"""Password hashing (bcrypt via passlib)."""

from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


def hash_password(password: str, rounds: int | None = None) -> str:
    """One-way hash of a plaintext password.

    ``rounds`` overrides the configured bcrypt cost factor for this call.
    """
    if rounds is None:
        return pwd_context.hash(password)
    return pwd_context.handler("bcrypt").using(rounds=rounds).hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)
