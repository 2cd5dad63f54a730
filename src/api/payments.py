"""Online rent payment endpoints (Stripe Checkout)."""

import logging

from fastapi import APIRouter, Depends, Form, Header, Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from src.api.deps import get_app_settings, parse_month, require_tenant
from src.config.settings import Settings
from src.services import get_db
from src.services.checkout_service import CheckoutService
from src.services.errors import NotAuthorizedError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/initiate")
def initiate_payment(
    tenant_id: str | None = Form(None, alias="tenantId"),  # noqa: B008
    amount: str | None = Form(None),  # noqa: B008
    billing_month: str | None = Form(None, alias="billingMonth"),  # noqa: B008
    session_tenant_id: int = Depends(require_tenant),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> RedirectResponse:
    """Start a Stripe Checkout for the logged-in tenant and redirect to it.

    Raises:
        400: Missing tenantId or amount, invalid amount or month
        401: Not logged in as this tenant
        500: Stripe key not configured
        502: Stripe rejected the request
    """
    if not tenant_id or not amount:
        raise ValidationError("Missing tenantId or amount")
    if tenant_id.strip() != str(session_tenant_id):
        logger.warning(f"Tenant {session_tenant_id} tried to pay for tenant {tenant_id}")
        raise NotAuthorizedError()

    url = CheckoutService(db, settings).create_checkout_url(
        session_tenant_id, amount, parse_month(billing_month)
    )
    return RedirectResponse(url=url, status_code=303)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> dict:
    """Receive Stripe events; completed checkouts are recorded as online payments.

    Returns:
        {"received": True, "recorded": bool}
    """
    payload = await request.body()
    # Session work is blocking; keep it off the event loop
    return await run_in_threadpool(
        CheckoutService(db, settings).handle_webhook, payload, stripe_signature
    )
