"""API client for the BioForge REST API."""

from __future__ import annotations

from typing import Any

import httpx


class BioForgeClient:
    """HTTP client wrapping the BioForge API endpoints."""

    def __init__(self, base_url: str = "http://localhost:8400", auth_token: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        headers = {}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self._client = httpx.Client(base_url=f"{self.base_url}/api/v1", headers=headers, timeout=120)

    def _check(self, resp: httpx.Response) -> httpx.Response:
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise RuntimeError(f"API error ({resp.status_code}): {detail}")
        return resp

    def _handle(self, resp: httpx.Response) -> Any:
        return self._check(resp).json()

    # --- Profiles ---

    def list_profiles(self) -> list[dict]:
        return self._handle(self._client.get("/profiles"))

    def create_profile(self, data: dict) -> dict:
        return self._handle(self._client.post("/profiles", json=data))

    def get_profile(self, profile_id: str) -> dict:
        return self._handle(self._client.get(f"/profiles/{profile_id}"))

    def update_profile(self, profile_id: str, data: dict) -> dict:
        return self._handle(self._client.put(f"/profiles/{profile_id}", json=data))

    def delete_profile(self, profile_id: str) -> None:
        self._check(self._client.delete(f"/profiles/{profile_id}"))

    # --- Generation ---

    def list_biographies(self, profile_id: str) -> list[dict]:
        return self._handle(self._client.get(f"/profiles/{profile_id}/biographies"))

    def generate(self, profile_id: str, bio_types: list[str], tone: str) -> dict:
        return self._handle(self._client.post(
            f"/profiles/{profile_id}/biographies/generate",
            json={"bio_types": bio_types, "tone": tone},
        ))

    def generate_schema(self, profile_id: str) -> dict:
        return self._handle(self._client.post(f"/profiles/{profile_id}/schema"))

    # --- Publication ---

    def set_published(self, profile_id: str, published: bool) -> dict:
        return self._handle(self._client.put(
            f"/profiles/{profile_id}/publish", json={"published": published}
        ))

    def publish_press_kit(self, profile_id: str, settings: dict) -> dict:
        return self._handle(self._client.put(f"/profiles/{profile_id}/press-kit", json=settings))

    def download_press_kit(self, slug: str) -> str:
        return self._check(self._client.get(f"/public/press-kits/{slug}/download")).text

    # --- Account ---

    def get_account(self) -> dict:
        return self._handle(self._client.get("/account"))

    def usage_summary(self) -> dict:
        return self._handle(self._client.get("/account/usage"))

    def checkout(self, plan: str) -> dict:
        return self._handle(self._client.post("/billing/checkout", json={"plan": plan}))

    # --- Templates ---

    def list_templates(self, **params: Any) -> list[dict]:
        return self._handle(self._client.get("/templates", params=params))
