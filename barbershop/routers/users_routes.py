# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends

from barbershop.deps import require_admin
from barbershop.models import User
from barbershop.schemas import UserPublic

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(require_admin)):
    return {
        "id": current_user.id,
        "email": current_user.email,
        "role": current_user.role,
    }
