from functools import lru_cache
from typing import Optional

import bcrypt
from fastapi import Request

import settings
from errors import Unauthorized

SESSION_KEY = "is_admin"


@lru_cache(maxsize=1)
def admin_password_hash() -> bytes:
    if settings.ADMIN_PASSWORD_HASH:
        return settings.ADMIN_PASSWORD_HASH.encode("utf-8")
    return bcrypt.hashpw(settings.ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt())


def verify_password(password: Optional[str]) -> bool:
    if not password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), admin_password_hash())
    except ValueError:
        # Malformed ADMIN_PASSWORD_HASH
        return False


def is_admin(request: Request) -> bool:
    return bool(request.session.get(SESSION_KEY))


def require_admin(request: Request) -> None:
    if not is_admin(request):
        raise Unauthorized()
