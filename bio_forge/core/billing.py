"""Billing — checkout initiation and the append-only payment history."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import httpx
import structlog

from bio_forge.config import Settings, get_settings
from bio_forge.core.access import CallerContext
from bio_forge.core.errors import CollaboratorFailure, ResourceNotFound, ValidationFailure
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import ACCOUNTS, BILLING_HISTORY, BillingRow, Plan, Role

logger = structlog.get_logger()

DEMO_MODE_MESSAGE = "Payment integration is not configured. Plan would be updated upon payment."


@dataclass(frozen=True)
class CheckoutSession:
    checkout_url: str | None
    configured: bool
    message: str = ""


class BillingService:
    def __init__(
        self,
        db: SupabaseClient,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.db = db
        self.settings = settings
        self._transport = transport

    def billing_history(self, caller: CallerContext, limit: int = 10) -> list[BillingRow]:
        rows = self.db.select(
            BILLING_HISTORY,
            filters={"user_id": caller.user_id},
            order_by="created_at",
            ascending=False,
            limit=limit,
        )
        return [BillingRow(**row) for row in rows]

    async def start_checkout(self, caller: CallerContext, plan: Plan) -> CheckoutSession:
        """Ask the checkout collaborator for a redirect URL for ``plan``."""
        if plan == Plan.FREE:
            raise ValidationFailure("The free plan needs no checkout")
        if plan.value == caller.account.subscription_plan.value:
            raise ValidationFailure(f"Already on the '{plan.value}' plan")

        if not self.settings.checkout_configured:
            logger.info("billing.checkout_unconfigured", plan=plan.value)
            return CheckoutSession(checkout_url=None, configured=False, message=DEMO_MODE_MESSAGE)

        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                resp = await client.post(
                    self.settings.checkout_url,
                    json={"planId": plan.value, "userId": caller.user_id, "email": caller.identity.email},
                    headers={"Authorization": f"Bearer {self.settings.checkout_api_key}"},
                )
                resp.raise_for_status()
                checkout_url = resp.json().get("checkoutUrl")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("billing.checkout_failed", plan=plan.value, error=str(e))
            raise CollaboratorFailure("Failed to start checkout. Please try again.") from e

        if not checkout_url:
            return CheckoutSession(checkout_url=None, configured=False, message=DEMO_MODE_MESSAGE)
        logger.info("billing.checkout_started", plan=plan.value, user_id=caller.user_id)
        return CheckoutSession(checkout_url=checkout_url, configured=True)

    def record_payment(
        self,
        caller: CallerContext,
        account_id: str,
        amount: float,
        currency: str = "USD",
        description: str | None = None,
        transaction_id: str | None = None,
        status: str = "completed",
    ) -> BillingRow:
        """Append a billing record. Administrators only; records are never edited."""
        caller.require_role(Role.ADMINISTRATOR)
        if not self.db.select(ACCOUNTS, filters={"id": account_id}, limit=1):
            raise ResourceNotFound(f"Account '{account_id}' not found")
        row = self.db.insert(
            BILLING_HISTORY,
            {
                "user_id": account_id,
                "amount": amount,
                "currency": currency,
                "description": description,
                "transaction_id": transaction_id,
                "status": status,
            },
        )
        logger.info("billing.payment_recorded", account_id=account_id, amount=amount, status=status)
        return BillingRow(**row)


@lru_cache
def get_billing_service() -> BillingService:
    """Get cached billing service instance."""
    return BillingService(get_supabase_client(), get_settings())
