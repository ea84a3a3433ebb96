# barbershop/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from .config import get_settings
from .db import init_db
from .errors import register_error_handlers
from .logging_utils import configure_logging
from .routers import (
    absences_routes,
    appointments_routes,
    auth_routes,
    barbers_routes,
    services_routes,
    users_routes,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    init_db()
    yield


app = FastAPI(title="Barbershop API", lifespan=lifespan)
register_error_handlers(app)


@app.middleware("http")
async def disable_sign_up(request: Request, call_next):
    # accounts are provisioned by barbershop-create-admin only
    if request.url.path.startswith(auth_routes.SIGN_UP_PREFIX):
        return RedirectResponse(url=auth_routes.SIGN_IN_PATH, status_code=307)
    return await call_next(request)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(services_routes.router)
app.include_router(barbers_routes.router)
app.include_router(appointments_routes.router)
app.include_router(absences_routes.router)
