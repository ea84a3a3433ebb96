# barbershop/deps.py

from typing import Optional

from fastapi import Depends

from .auth import get_optional_user
from .errors import Unauthorized
from .models import User


def require_role(user: Optional[User], role: str) -> User:
    if user is None or user.role != role:
        raise Unauthorized()
    return user


def require_admin(user: Optional[User] = Depends(get_optional_user)) -> User:
    return require_role(user, "admin")
