"""Login and logout endpoints for management and tenants."""

import logging
import secrets
import time

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from src.api.deps import (
    MANAGEMENT_ROLE,
    ROLE_COOKIE,
    TENANT_COOKIE,
    TENANT_ROLE,
    get_app_settings,
    log_debug,
)
from src.api.schemas import LoginRequest, LoginResponse
from src.config.settings import Settings
from src.services import get_db
from src.services.errors import NotAuthorizedError
from src.services.tenant_service import TenantService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _set_cookie(response: Response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(key, value, max_age=max_age, path="/", httponly=True, samesite="lax")


@router.post("/auth/management/login", response_model=LoginResponse)
def management_login(
    body: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> LoginResponse:
    """Log in the administrator against the configured credentials.

    Raises:
        401: Invalid management credentials
    """
    username_ok = secrets.compare_digest(body.username.strip().encode(), settings.admin_username.encode())
    password_ok = secrets.compare_digest(body.password.encode(), settings.admin_password.encode())
    if not (username_ok and password_ok):
        logger.warning(f"Failed management login for '{body.username}'")
        raise NotAuthorizedError("Invalid management credentials.")

    _set_cookie(response, ROLE_COOKIE, MANAGEMENT_ROLE, settings.cookie_max_age)
    response.delete_cookie(TENANT_COOKIE, path="/")
    logger.info("Management logged in")
    return LoginResponse(role=MANAGEMENT_ROLE)


@router.post("/auth/tenant/login", response_model=LoginResponse)
def tenant_login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> LoginResponse:
    """Log in a tenant with their generated credentials.

    Raises:
        401: Unknown user, wrong password or vacated tenant
    """
    start_time = time.time()
    tenant = TenantService(db).authenticate(body.username, body.password)

    _set_cookie(response, ROLE_COOKIE, TENANT_ROLE, settings.cookie_max_age)
    _set_cookie(response, TENANT_COOKIE, str(tenant.id), settings.cookie_max_age)
    log_debug("auth.tenant_login", start_time, tenant_id=tenant.id)
    return LoginResponse(role=TENANT_ROLE, tenant_id=tenant.id, name=tenant.name)


@router.get("/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear role cookies and go back to the landing page."""
    response = RedirectResponse(url="/", status_code=303)
    response.delete_cookie(ROLE_COOKIE, path="/")
    response.delete_cookie(TENANT_COOKIE, path="/")
    logger.debug("api.logout: role=%s", request.cookies.get(ROLE_COOKIE))
    return response
