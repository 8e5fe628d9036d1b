"""Administrator endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from bio_forge.api.deps import get_caller
from bio_forge.api.models import (
    PaymentCreate,
    PlanChangeRequest,
    PlatformStatsResponse,
    RoleChangeRequest,
)
from bio_forge.core.access import CallerContext
from bio_forge.core.accounts import AccountService, get_account_service
from bio_forge.core.billing import BillingService, get_billing_service
from bio_forge.core.usage import UsageLogger, get_usage_logger
from bio_forge.db.models import AccountRow, BillingRow, UsageLogRow

router = APIRouter()


@router.get("/accounts", response_model=list[AccountRow])
async def list_accounts(
    caller: CallerContext = Depends(get_caller),
    accounts: AccountService = Depends(get_account_service),
) -> list[AccountRow]:
    return accounts.list_accounts(caller)


@router.put("/accounts/{account_id}/plan", response_model=AccountRow)
async def change_plan(
    account_id: str,
    data: PlanChangeRequest,
    caller: CallerContext = Depends(get_caller),
    accounts: AccountService = Depends(get_account_service),
) -> AccountRow:
    """Change an account's plan and profile limit."""
    return accounts.change_plan(caller, account_id, data.plan)


@router.put("/accounts/{account_id}/role")
async def set_role(
    account_id: str,
    data: RoleChangeRequest,
    caller: CallerContext = Depends(get_caller),
    accounts: AccountService = Depends(get_account_service),
) -> dict[str, str]:
    role = accounts.set_role(caller, account_id, data.role)
    return {"account_id": account_id, "role": role.value}


@router.get("/stats", response_model=PlatformStatsResponse)
async def platform_stats(
    caller: CallerContext = Depends(get_caller),
    accounts: AccountService = Depends(get_account_service),
) -> PlatformStatsResponse:
    return PlatformStatsResponse(**accounts.platform_stats(caller))


@router.get("/usage", response_model=list[UsageLogRow])
async def recent_usage(
    limit: int = Query(default=50, le=200),
    caller: CallerContext = Depends(get_caller),
    usage: UsageLogger = Depends(get_usage_logger),
) -> list[UsageLogRow]:
    return usage.recent(caller, limit=limit)


@router.post("/payments", response_model=BillingRow, status_code=201)
async def record_payment(
    data: PaymentCreate,
    caller: CallerContext = Depends(get_caller),
    billing: BillingService = Depends(get_billing_service),
) -> BillingRow:
    """Append a billing record for an account."""
    return billing.record_payment(caller, **data.model_dump())
