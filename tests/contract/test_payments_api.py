"""Contract tests for Stripe Checkout initiation and the webhook."""

import asyncio
import json
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import stripe

from src.services.checkout_service import CheckoutService
from src.services.payment_service import PaymentService

CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_1"


class TestInitiate:
    def test_redirects_to_checkout(self, tenant_client, seeded) -> None:
        session = SimpleNamespace(id="cs_test_1", url=CHECKOUT_URL)
        with patch("stripe.checkout.Session.create", return_value=session) as create:
            response = tenant_client.post(
                "/api/payments/initiate",
                data={"tenantId": str(seeded["tenant_id"]), "amount": "10000", "billingMonth": "2024-03"},
                follow_redirects=False,
            )

        assert response.status_code == 303
        assert response.headers["location"] == CHECKOUT_URL
        assert create.call_args.kwargs["metadata"]["tenant_id"] == str(seeded["tenant_id"])
        assert create.call_args.kwargs["success_url"] == "http://testserver/tenant/dashboard?payment=success"

    def test_missing_amount_is_400(self, tenant_client, seeded) -> None:
        response = tenant_client.post(
            "/api/payments/initiate", data={"tenantId": str(seeded["tenant_id"])}, follow_redirects=False
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Missing tenantId or amount"

    def test_invalid_amount_is_400(self, tenant_client, seeded) -> None:
        response = tenant_client.post(
            "/api/payments/initiate",
            data={"tenantId": str(seeded["tenant_id"]), "amount": "-1"},
            follow_redirects=False,
        )

        assert response.status_code == 400

    def test_cannot_pay_for_another_tenant(self, tenant_client, seeded) -> None:
        response = tenant_client.post(
            "/api/payments/initiate",
            data={"tenantId": str(seeded["tenant_id"] + 1), "amount": "100"},
            follow_redirects=False,
        )

        assert response.status_code == 401

    def test_missing_key_is_500(self, app, tenant_client, seeded) -> None:
        app.state.settings = app.state.settings.model_copy(update={"stripe_secret_key": ""})

        response = tenant_client.post(
            "/api/payments/initiate",
            data={"tenantId": str(seeded["tenant_id"]), "amount": "100"},
            follow_redirects=False,
        )

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Server misconfiguration: Missing Payment Key"

    def test_stripe_failure_is_502(self, tenant_client, seeded) -> None:
        with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("unavailable")):
            response = tenant_client.post(
                "/api/payments/initiate",
                data={"tenantId": str(seeded["tenant_id"]), "amount": "100"},
                follow_redirects=False,
            )

        assert response.status_code == 502


class TestWebhook:
    def payload(self, tenant_id: int) -> bytes:
        return json.dumps(
            {
                "type": "checkout.session.completed",
                "data": {
                    "object": {
                        "id": "cs_test_1",
                        "amount_total": 1000000,
                        "metadata": {"tenant_id": str(tenant_id), "payment_type": "rent"},
                    }
                },
            }
        ).encode()

    def test_completed_checkout_recorded_once(self, client, api_session, seeded) -> None:
        payload = self.payload(seeded["tenant_id"])
        headers = {"Stripe-Signature": "t=1,v1=abc", "Content-Type": "application/json"}

        with patch("stripe.Webhook.construct_event") as construct:
            first = client.post("/api/payments/webhook", content=payload, headers=headers)
            second = client.post("/api/payments/webhook", content=payload, headers=headers)

        assert first.json() == {"received": True, "recorded": True}
        assert second.json() == {"received": True, "recorded": False}
        assert construct.call_args.kwargs["payload"] == payload
        assert construct.call_args.kwargs["sig_header"] == "t=1,v1=abc"

        payments = PaymentService(api_session).list_for_tenant(seeded["tenant_id"])
        assert [(p.amount, p.method) for p in payments] == [(Decimal("10000"), "online")]

    def test_bad_signature_is_400(self, client, seeded) -> None:
        error = stripe.SignatureVerificationError("no match", "t=1,v1=bad")
        with patch("stripe.Webhook.construct_event", side_effect=error):
            response = client.post(
                "/api/payments/webhook",
                content=self.payload(seeded["tenant_id"]),
                headers={"Stripe-Signature": "t=1,v1=bad"},
            )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid signature"

    def test_handler_runs_off_the_event_loop(self, client, seeded) -> None:
        threads = []

        def handle(service, payload, signature):
            try:
                asyncio.get_running_loop()
                threads.append("event-loop")
            except RuntimeError:
                threads.append("worker")
            return {"received": True, "recorded": False}

        with patch.object(CheckoutService, "handle_webhook", autospec=True, side_effect=handle):
            response = client.post(
                "/api/payments/webhook",
                content=self.payload(seeded["tenant_id"]),
                headers={"Stripe-Signature": "t=1,v1=abc"},
            )

        assert response.status_code == 200
        assert threads == ["worker"]
