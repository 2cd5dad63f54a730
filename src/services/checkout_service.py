"""Stripe Checkout integration for online rent payments.

The redirect back to the tenant dashboard is not trusted as proof of payment;
payments are recorded only from signed checkout.session.completed webhooks.
"""

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any

import stripe
from sqlalchemy.orm import Session

from src.config.settings import Settings
from src.models.payment import PaymentMethod, PaymentType
from src.models.tenant import Tenant
from src.services.errors import (
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from src.services.payment_service import PaymentService
from src.services.rent_ledger import MonthKey
from src.services.tenant_service import parse_amount

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"


def to_minor_units(amount: Decimal) -> int:
    """Convert a currency amount to cents/paisa."""
    return int((amount * 100).to_integral_value())


class CheckoutService:
    """Creates checkout sessions and consumes completion webhooks."""

    def __init__(self, db_session: Session, settings: Settings):
        self.db = db_session
        self.settings = settings

    def create_checkout_url(
        self,
        tenant_id: int,
        amount: Any,
        billing_month: MonthKey | None = None,
    ) -> str:
        """Create a hosted checkout page for a rent payment.

        Returns:
            URL to redirect the tenant to

        Raises:
            ConfigurationError: If no Stripe key is configured
            ValidationError: If amount is not positive
            NotFoundError: If tenant does not exist
            ExternalServiceError: If Stripe rejects the request
        """
        if not self.settings.stripe_secret_key:
            logger.error("Missing STRIPE_SECRET_KEY env variable")
            raise ConfigurationError("Server misconfiguration: Missing Payment Key")

        value = parse_amount(amount, "Amount", allow_zero=False)
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found.")

        base_url = self.settings.base_url.rstrip("/")
        metadata = {
            "tenant_id": str(tenant.id),
            "payment_type": PaymentType.RENT.value,
        }
        if billing_month:
            metadata["billing_month"] = str(billing_month)

        try:
            session = stripe.checkout.Session.create(
                api_key=self.settings.stripe_secret_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": self.settings.payment_currency,
                            "product_data": {"name": "Monthly Rent Payment"},
                            "unit_amount": to_minor_units(value),
                        },
                        "quantity": 1,
                    }
                ],
                success_url=f"{base_url}/tenant/dashboard?payment=success",
                cancel_url=f"{base_url}/tenant/dashboard?payment=cancelled",
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe Checkout Error: {e}", exc_info=True)
            raise ExternalServiceError(str(e) or "Payment initiation failed") from e

        if not session.url:
            raise ExternalServiceError("Failed to create Stripe session URL")

        logger.info(f"Created checkout session {session.id} for tenant {tenant.id}: {value}")
        return session.url

    def handle_webhook(self, payload: bytes, signature: str | None) -> dict:
        """Verify a Stripe webhook and record completed payments.

        Returns:
            {"received": True, "recorded": bool}

        Raises:
            ConfigurationError: If no webhook secret is configured
            ValidationError: On invalid payload or signature
        """
        if not self.settings.stripe_webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET not configured; cannot verify Stripe webhook.")
            raise ConfigurationError("Webhook secret not configured")

        try:
            stripe.Webhook.construct_event(
                payload=payload,
                sig_header=signature or "",
                secret=self.settings.stripe_webhook_secret,
            )
        except ValueError as e:
            logger.warning("Invalid payload in Stripe webhook.")
            raise ValidationError("Invalid payload") from e
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid signature in Stripe webhook.")
            raise ValidationError("Invalid signature") from e

        event = json.loads(payload)
        event_type = event.get("type")
        if event_type != COMPLETED_EVENT:
            logger.debug("webhook.stripe: ignoring event type=%s", event_type)
            return {"received": True, "recorded": False}

        return {"received": True, "recorded": self._record_completed(event["data"]["object"])}

    def _record_completed(self, session_obj: dict) -> bool:
        session_id = session_obj.get("id")
        metadata = session_obj.get("metadata") or {}
        amount_total = session_obj.get("amount_total")
        tenant_id = metadata.get("tenant_id")

        if not (session_id and tenant_id and amount_total):
            logger.error(f"Missing required data in completed checkout session: {session_obj}")
            return False

        payments = PaymentService(self.db)
        if payments.find_by_reference(session_id):
            logger.info(f"Checkout session {session_id} already recorded")
            return False

        billing_month = None
        if metadata.get("billing_month"):
            try:
                billing_month = MonthKey.parse(metadata["billing_month"])
            except ValueError:
                logger.warning(f"Bad billing_month in session {session_id}: {metadata}")

        try:
            payments.record_payment(
                tenant_id=int(tenant_id),
                amount=Decimal(int(amount_total)) / 100,
                paid_on=date.today(),
                billing_month=billing_month,
                payment_type=metadata.get("payment_type") or PaymentType.RENT,
                method=PaymentMethod.ONLINE,
                notes="Stripe Checkout",
                external_reference=session_id,
            )
        except NotFoundError:
            logger.error(f"Checkout session {session_id} refers to unknown tenant {tenant_id}")
            return False
        return True


__all__ = ["CheckoutService", "to_minor_units"]
