"""Account, usage and billing endpoints for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from bio_forge.api.deps import get_caller
from bio_forge.api.models import (
    AccountResponse,
    AccountSettingsUpdate,
    CheckoutRequest,
    CheckoutResponse,
    UsageSummaryResponse,
)
from bio_forge.core.access import CallerContext
from bio_forge.core.accounts import AccountService, get_account_service
from bio_forge.core.billing import BillingService, get_billing_service
from bio_forge.core.usage import UsageLogger, get_usage_logger
from bio_forge.db.models import BillingRow

router = APIRouter()


def _account_response(caller: CallerContext) -> AccountResponse:
    return AccountResponse(
        account=caller.account,
        role=caller.role,
        email=caller.identity.email,
        can_create_profile=caller.can_create_profile(),
    )


@router.get("/account", response_model=AccountResponse)
async def get_account(caller: CallerContext = Depends(get_caller)) -> AccountResponse:
    """Current account, role and plan usage."""
    return _account_response(caller)


@router.put("/account", response_model=AccountResponse)
async def update_account(
    data: AccountSettingsUpdate,
    caller: CallerContext = Depends(get_caller),
    accounts: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = accounts.update_settings(caller, data.display_name, data.company_name)
    return _account_response(
        CallerContext(identity=caller.identity, role=caller.role, account=account)
    )


@router.get("/account/usage", response_model=UsageSummaryResponse)
async def usage_summary(
    caller: CallerContext = Depends(get_caller),
    usage: UsageLogger = Depends(get_usage_logger),
) -> UsageSummaryResponse:
    return UsageSummaryResponse(**usage.summary(caller))


@router.get("/billing/history", response_model=list[BillingRow])
async def billing_history(
    limit: int = Query(default=10, le=100),
    caller: CallerContext = Depends(get_caller),
    billing: BillingService = Depends(get_billing_service),
) -> list[BillingRow]:
    return billing.billing_history(caller, limit=limit)


@router.post("/billing/checkout", response_model=CheckoutResponse)
async def start_checkout(
    data: CheckoutRequest,
    caller: CallerContext = Depends(get_caller),
    billing: BillingService = Depends(get_billing_service),
) -> CheckoutResponse:
    """Start a plan upgrade. ``checkout_url`` is null when payments are unconfigured."""
    session = await billing.start_checkout(caller, data.plan)
    return CheckoutResponse(
        checkout_url=session.checkout_url,
        configured=session.configured,
        message=session.message,
    )
