"""Tests for checkout and billing history."""

import json

import httpx
import pytest

from bio_forge.config import Settings
from bio_forge.core.billing import DEMO_MODE_MESSAGE, BillingService
from bio_forge.core.errors import AuthorizationDenied, CollaboratorFailure, ResourceNotFound, ValidationFailure
from bio_forge.db.models import Plan

from tests.conftest import OWNER_ID


def _configured(mock_db, handler) -> BillingService:
    settings = Settings(checkout_url="https://pay.example.com/checkout", checkout_api_key="pk-test")
    return BillingService(mock_db, settings, transport=httpx.MockTransport(handler))


class TestCheckout:
    @pytest.mark.asyncio
    async def test_demo_mode(self, mock_db, owner):
        billing = BillingService(mock_db, Settings(checkout_url=""))
        session = await billing.start_checkout(owner, Plan.PRO)
        assert session.checkout_url is None
        assert session.configured is False
        assert session.message == DEMO_MODE_MESSAGE

    @pytest.mark.asyncio
    async def test_configured_checkout(self, mock_db, owner):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json={"checkoutUrl": "https://pay.example.com/s/abc"})

        session = await _configured(mock_db, handler).start_checkout(owner, Plan.AGENCY)
        assert session.checkout_url == "https://pay.example.com/s/abc"
        assert session.configured is True
        assert seen["body"] == {"planId": "agency", "userId": OWNER_ID, "email": "jane@example.com"}
        assert seen["auth"] == "Bearer pk-test"

    @pytest.mark.asyncio
    async def test_collaborator_error(self, mock_db, owner):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(CollaboratorFailure, match="Failed to start checkout"):
            await _configured(mock_db, handler).start_checkout(owner, Plan.PRO)

    @pytest.mark.asyncio
    async def test_free_plan_rejected(self, mock_db, owner):
        billing = BillingService(mock_db, Settings(checkout_url=""))
        with pytest.raises(ValidationFailure):
            await billing.start_checkout(owner, Plan.FREE)

    @pytest.mark.asyncio
    async def test_current_plan_rejected(self, mock_db, access, owner):
        mock_db.update("accounts", OWNER_ID, {"subscription_plan": "pro", "profile_limit": 10})
        caller = access.context_for_token("owner-token")
        billing = BillingService(mock_db, Settings(checkout_url=""))
        with pytest.raises(ValidationFailure, match="Already on"):
            await billing.start_checkout(caller, Plan.PRO)


class TestPayments:
    def test_record_payment(self, mock_db, admin, owner):
        billing = BillingService(mock_db, Settings())
        row = billing.record_payment(admin, OWNER_ID, 19.0, transaction_id="txn-1", description="Pro plan")
        assert row.amount == 19.0
        assert row.status == "completed"
        assert row.transaction_id == "txn-1"

    def test_record_payment_requires_admin(self, mock_db, owner):
        billing = BillingService(mock_db, Settings())
        with pytest.raises(AuthorizationDenied):
            billing.record_payment(owner, OWNER_ID, 19.0)
        assert mock_db.rows("billing_history") == []

    def test_record_payment_unknown_account(self, mock_db, admin):
        billing = BillingService(mock_db, Settings())
        with pytest.raises(ResourceNotFound):
            billing.record_payment(admin, "00000000-0000-4000-8000-000000000000", 5.0)

    def test_history_is_own_and_newest_first(self, mock_db, admin, owner, other):
        billing = BillingService(mock_db, Settings())
        billing.record_payment(admin, OWNER_ID, 19.0, description="first")
        billing.record_payment(admin, OWNER_ID, 49.0, description="second")
        billing.record_payment(admin, other.user_id, 5.0)

        history = billing.billing_history(owner)
        assert [row.description for row in history] == ["second", "first"]
        assert billing.billing_history(owner, limit=1)[0].description == "second"
