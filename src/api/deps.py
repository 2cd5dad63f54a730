"""Request dependencies: settings, blob store, month parsing and role guards.

Roles are carried in the `role` cookie ("management" or "tenant"); tenant
requests additionally carry `tenantId`.
"""

import logging
import time
from typing import Any

from fastapi import Cookie, Depends, Request
from sqlalchemy.orm import Session

from src.config.settings import Settings
from src.models.tenant import Tenant
from src.services import get_db
from src.services.errors import NotAuthorizedError, ValidationError
from src.services.rent_ledger import MonthKey
from src.services.storage import LocalBlobStore

logger = logging.getLogger(__name__)

ROLE_COOKIE = "role"
TENANT_COOKIE = "tenantId"
MANAGEMENT_ROLE = "management"
TENANT_ROLE = "tenant"


def log_debug(endpoint: str, start_time: float, **kwargs: Any) -> None:
    """Log API request with timing at DEBUG level.

    Args:
        endpoint: Endpoint name (e.g., 'management.dashboard')
        start_time: Request start time from time.time()
        **kwargs: Additional fields to log (tenant_id, count, month, etc.)
    """
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug(
        "api.%s: %sduration_ms=%d",
        endpoint,
        f"{extra} " if extra else "",
        duration_ms,
    )


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> LocalBlobStore:
    return request.app.state.store


def parse_month(month: str | None) -> MonthKey | None:
    """Parse an optional ?month=YYYY-MM query value."""
    if not month:
        return None
    try:
        return MonthKey.parse(month)
    except ValueError as e:
        raise ValidationError(f"Invalid month '{month}'. Use YYYY-MM.") from e


def require_management(role: str | None = Cookie(None)) -> None:  # noqa: B008
    if role != MANAGEMENT_ROLE:
        raise NotAuthorizedError()


def require_tenant(
    role: str | None = Cookie(None),  # noqa: B008
    tenant_id: str | None = Cookie(None, alias=TENANT_COOKIE),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> int:
    """Return the logged-in tenant's id.

    The cookie outlives the tenancy, so the tenant is re-checked on every
    request: unknown or vacated tenants are rejected.
    """
    if role != TENANT_ROLE or not tenant_id:
        raise NotAuthorizedError()
    try:
        tenant_pk = int(tenant_id)
    except ValueError as e:
        raise NotAuthorizedError() from e
    tenant = db.get(Tenant, tenant_pk)
    if tenant is None or not tenant.is_active:
        logger.info(f"Rejected tenant session for inactive or unknown tenant {tenant_pk}")
        raise NotAuthorizedError()
    return tenant_pk


__all__ = [
    "MANAGEMENT_ROLE",
    "ROLE_COOKIE",
    "TENANT_COOKIE",
    "TENANT_ROLE",
    "get_app_settings",
    "get_store",
    "log_debug",
    "parse_month",
    "require_management",
    "require_tenant",
]
