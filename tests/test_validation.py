"""Tests for validation helpers."""

import pytest

from bio_forge.utils.validation import (
    make_profile_slug,
    normalise_social_links,
    slugify,
    summarise,
    validate_slug,
)


class TestSlugs:
    def test_slugify(self):
        assert slugify("Jane Doe, PhD") == "jane-doe-phd"
        assert slugify("***") == ""

    def test_profile_slug(self):
        slug = make_profile_slug("Jane Doe")
        assert slug.startswith("jane-doe-")
        assert len(slug) == len("jane-doe-") + 6
        assert validate_slug(slug)

    def test_profile_slug_fallback(self):
        assert make_profile_slug("???").startswith("profile-")

    def test_validate_slug(self):
        assert validate_slug("jane-doe")
        assert not validate_slug("Jane")
        assert not validate_slug("-jane")
        assert not validate_slug("a" * 101)


class TestSocialLinks:
    def test_none_is_empty(self):
        assert normalise_social_links(None) == []

    def test_trims_and_deduplicates(self):
        links = normalise_social_links(["https://a.com/x ", "https://b.com", "https://a.com/x"])
        assert links == ["https://a.com/x", "https://b.com"]

    @pytest.mark.parametrize(
        "value",
        [
            "https://a.com",
            {"twitter": "https://x.com/jane"},
            ["ftp://a.com"],
            ["x.com/jane"],
            [42],
        ],
    )
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            normalise_social_links(value)


def test_summarise():
    assert summarise("abc", length=2) == "ab"
    assert summarise("short") == "short"
