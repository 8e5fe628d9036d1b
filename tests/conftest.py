"""Test fixtures — mock Supabase client, fake completion service and callers."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from bio_forge.core.access import AccessControl, CallerContext
from bio_forge.core.completion import Completion, CompletionClient
from bio_forge.core.errors import CollaboratorFailure
from bio_forge.db.client import SupabaseClient
from bio_forge.db.models import BioType

OWNER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_ID = "22222222-2222-4222-8222-222222222222"
ADMIN_ID = "33333333-3333-4333-8333-333333333333"

USERS = {
    "owner-token": {"id": OWNER_ID, "email": "jane@example.com"},
    "other-token": {"id": OTHER_ID, "email": "mallory@example.com"},
    "admin-token": {"id": ADMIN_ID, "email": "admin@example.com"},
}


class MockSupabaseClient(SupabaseClient):
    """In-memory mock of the Supabase client for testing."""

    def __init__(self):
        self._tables: dict[str, list[dict[str, Any]]] = {
            "accounts": [],
            "user_roles": [],
            "bio_profiles": [],
            "biographies": [],
            "schema_snippets": [],
            "press_kits": [],
            "templates": [],
            "ai_request_logs": [],
            "billing_history": [],
            "profile_analytics": [],
        }
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.rpc_calls: list[tuple[str, dict[str, Any]]] = []

    def _now(self) -> str:
        # strictly increasing so created_at / updated_at ordering is deterministic
        self._clock += timedelta(milliseconds=1)
        return self._clock.isoformat()

    def _matching(self, table: str, filters: dict[str, Any] | None) -> list[dict[str, Any]]:
        rows = self._tables.setdefault(table, [])
        if filters:
            rows = [r for r in rows if all(r.get(k) == v for k, v in filters.items())]
        return rows

    def insert(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        now = self._now()
        record = {"id": str(uuid4()), "created_at": now, "updated_at": now, **data}
        self._tables.setdefault(table, []).append(record)
        return dict(record)

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        rows = self._matching(table, filters)
        if order_by:
            rows = sorted(rows, key=lambda r: r.get(order_by) or "", reverse=not ascending)
        if limit:
            rows = rows[:limit]
        return [dict(r) for r in rows]

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        return len(self._matching(table, filters))

    def update(self, table: str, id: str, data: dict[str, Any]) -> dict[str, Any]:
        for row in self._tables.get(table, []):
            if row["id"] == id:
                row.update(data)
                row["updated_at"] = self._now()
                return dict(row)
        raise CollaboratorFailure(f"Row {id} not found in {table}")

    def update_where(
        self, table: str, filters: dict[str, Any], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        updated = []
        for row in self._matching(table, filters):
            row.update(data)
            row["updated_at"] = self._now()
            updated.append(dict(row))
        return updated

    def upsert(self, table: str, data: dict[str, Any], on_conflict: str) -> dict[str, Any]:
        keys = [k.strip() for k in on_conflict.split(",")]
        existing = self._matching(table, {k: data[k] for k in keys})
        if existing:
            row = existing[0]
            row.update({k: v for k, v in data.items() if k not in ("id", "created_at")})
            row["updated_at"] = self._now()
            return dict(row)
        return self.insert(table, data)

    def delete(self, table: str, id: str) -> None:
        self._tables[table] = [r for r in self._tables.get(table, []) if r["id"] != id]

    def rpc(self, function: str, params: dict[str, Any]) -> Any:
        self.rpc_calls.append((function, params))
        if function == "delete_bio_profile":
            return self._delete_bio_profile(params["p_profile_id"])
        if function == "increment_profile_view":
            return self._increment_profile_view(params["p_profile_id"])
        raise CollaboratorFailure(f"Unknown function {function}")

    def _delete_bio_profile(self, profile_id: str) -> None:
        profiles = self._matching("bio_profiles", {"id": profile_id})
        if not profiles:
            return None
        owner_id = profiles[0]["owner_id"]
        for table in ("biographies", "schema_snippets", "press_kits", "profile_analytics"):
            self._tables[table] = [r for r in self._tables[table] if r["profile_id"] != profile_id]
        self.delete("bio_profiles", profile_id)
        for account in self._matching("accounts", {"id": owner_id}):
            account["profile_count"] = max(account["profile_count"] - 1, 0)
        return None

    def _increment_profile_view(self, profile_id: str) -> None:
        today = date.today().isoformat()
        rows = self._matching("profile_analytics", {"profile_id": profile_id, "view_date": today})
        if rows:
            rows[0]["views_count"] += 1
        else:
            self.insert("profile_analytics", {"profile_id": profile_id, "view_date": today, "views_count": 1})
        return None

    def get_user(self, token: str) -> dict[str, Any] | None:
        return USERS.get(token)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self._tables[table]

    def reset(self):
        for table in self._tables:
            self._tables[table] = []


class FakeCompletionClient(CompletionClient):
    """Scripted completion service. Fails for the bio types listed in ``fail_on``."""

    def __init__(self, text: str = "Jane Doe is an engineer.", tokens_used: int = 42):
        super().__init__(api_key="test-key")
        self.text = text
        self.tokens_used = tokens_used
        self.fail_on: set[BioType] = set()
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system: str, prompt: str) -> Completion:
        self.calls.append((system, prompt))
        # prompts open with "Write a <bio_type> biography"
        bio_type = BioType(prompt.split()[2])
        if bio_type in self.fail_on:
            raise CollaboratorFailure("Completion service returned 500")
        return Completion(text=f"{self.text} ({bio_type.value})", tokens_used=self.tokens_used)


@pytest.fixture
def mock_db() -> MockSupabaseClient:
    """Fresh mock database for each test."""
    return MockSupabaseClient()


@pytest.fixture
def completions() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def access(mock_db) -> AccessControl:
    return AccessControl(mock_db)


@pytest.fixture
def owner(access) -> CallerContext:
    """Signed-in standard user on the free plan."""
    return access.context_for_token("owner-token")


@pytest.fixture
def other(access) -> CallerContext:
    return access.context_for_token("other-token")


@pytest.fixture
def admin(mock_db, access) -> CallerContext:
    mock_db.insert("user_roles", {"user_id": ADMIN_ID, "role": "administrator"})
    return access.context_for_token("admin-token")


@pytest.fixture
def registry(mock_db):
    from bio_forge.core.profiles import ProfileRegistry

    return ProfileRegistry(mock_db)


@pytest.fixture
def sample_profile(registry, owner):
    """A person profile owned by ``owner``."""
    return registry.create_profile(
        owner,
        name="Jane Doe",
        job_title="Engineer",
        website="https://jane.dev",
        bio_notes="Builds compilers.",
        social_links=["https://x.com/jane"],
    )


@pytest.fixture
def app(mock_db, completions):
    """FastAPI test app with mocked dependencies."""
    from bio_forge.config import Settings, get_settings
    from bio_forge.core.access import get_access_control
    from bio_forge.core.accounts import AccountService, get_account_service
    from bio_forge.core.billing import BillingService, get_billing_service
    from bio_forge.core.generation import BioGenerator, get_bio_generator
    from bio_forge.core.profiles import ProfileRegistry, get_profile_registry
    from bio_forge.core.publication import PublicationService, get_publication_service
    from bio_forge.core.schema_markup import SchemaGenerator, get_schema_generator
    from bio_forge.core.templates import TemplateCatalog, get_template_catalog
    from bio_forge.core.usage import UsageLogger, get_usage_logger
    from bio_forge.db.client import get_supabase_client
    from bio_forge.main import app as _app

    settings = Settings(checkout_url="", checkout_api_key="")
    registry = ProfileRegistry(mock_db)
    usage = UsageLogger(mock_db)

    # Override dependencies
    _app.dependency_overrides[get_supabase_client] = lambda: mock_db
    _app.dependency_overrides[get_settings] = lambda: settings
    _app.dependency_overrides[get_access_control] = lambda: AccessControl(mock_db)
    _app.dependency_overrides[get_account_service] = lambda: AccountService(mock_db)
    _app.dependency_overrides[get_profile_registry] = lambda: registry
    _app.dependency_overrides[get_usage_logger] = lambda: usage
    _app.dependency_overrides[get_bio_generator] = lambda: BioGenerator(
        mock_db, registry, completions, usage
    )
    _app.dependency_overrides[get_schema_generator] = lambda: SchemaGenerator(mock_db, registry)
    _app.dependency_overrides[get_publication_service] = lambda: PublicationService(mock_db, registry)
    _app.dependency_overrides[get_template_catalog] = lambda: TemplateCatalog(mock_db)
    _app.dependency_overrides[get_billing_service] = lambda: BillingService(mock_db, settings)

    yield _app

    _app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"Authorization": "Bearer owner-token"}


@pytest.fixture
def other_headers() -> dict[str, str]:
    return {"Authorization": "Bearer other-token"}


@pytest.fixture
def admin_headers(mock_db) -> dict[str, str]:
    mock_db.insert("user_roles", {"user_id": ADMIN_ID, "role": "administrator"})
    return {"Authorization": "Bearer admin-token"}
