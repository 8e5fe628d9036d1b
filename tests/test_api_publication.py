"""Tests for publishing endpoints and the public read paths."""

import pytest


@pytest.fixture
def profile(client, owner_headers):
    resp = client.post(
        "/api/v1/profiles",
        json={"name": "Jane Doe", "job_title": "Engineer", "social_links": ["https://x.com/jane"]},
        headers=owner_headers,
    )
    return resp.json()


class TestPublicProfileAPI:
    def test_unpublished_is_not_found(self, client, profile):
        resp = client.get(f"/api/v1/public/profiles/{profile['slug']}")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "This profile doesn't exist or is not published."

    def test_published_is_visible_without_auth(self, client, owner_headers, profile):
        resp = client.put(
            f"/api/v1/profiles/{profile['id']}/publish", json={"published": True}, headers=owner_headers
        )
        assert resp.json()["published"] is True

        page = client.get(f"/api/v1/public/profiles/{profile['slug']}")
        assert page.status_code == 200
        assert page.json()["profile"]["name"] == "Jane Doe"
        assert page.json()["schema_snippet"] is None

        analytics = client.get(f"/api/v1/profiles/{profile['id']}/analytics", headers=owner_headers)
        assert analytics.json()[0]["views_count"] == 1

    def test_publish_foreign_profile(self, client, other_headers, profile):
        resp = client.put(
            f"/api/v1/profiles/{profile['id']}/publish", json={"published": True}, headers=other_headers
        )
        assert resp.status_code == 403


class TestPressKitAPI:
    def test_publish_and_download(self, client, owner_headers, profile):
        client.post(
            f"/api/v1/profiles/{profile['id']}/biographies/generate",
            json={"bio_types": ["short"]},
            headers=owner_headers,
        )
        kit = client.put(
            f"/api/v1/profiles/{profile['id']}/press-kit", json={}, headers=owner_headers
        ).json()
        assert kit["slug"] == f"{profile['slug']}-kit"

        page = client.get(f"/api/v1/public/press-kits/{kit['slug']}")
        assert page.status_code == 200
        assert page.json()["press_kit"]["views_count"] == 1

        download = client.get(f"/api/v1/public/press-kits/{kit['slug']}/download")
        assert download.status_code == 200
        assert download.headers["content-type"].startswith("text/plain")
        assert 'filename="jane-doe-press-kit.txt"' in download.headers["content-disposition"]
        assert "SHORT BIOGRAPHY" in download.text
        assert "FULL BIOGRAPHY" not in download.text

    def test_unknown_kit(self, client):
        resp = client.get("/api/v1/public/press-kits/nope-kit/download")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "This press kit doesn't exist or is not published."

    def test_owner_reads_kit_settings(self, client, owner_headers, profile):
        assert client.get(f"/api/v1/profiles/{profile['id']}/press-kit", headers=owner_headers).status_code == 404
        client.put(
            f"/api/v1/profiles/{profile['id']}/press-kit",
            json={"include_images": False},
            headers=owner_headers,
        )
        kit = client.get(f"/api/v1/profiles/{profile['id']}/press-kit", headers=owner_headers).json()
        assert kit["include_images"] is False
        assert kit["is_published"] is True
