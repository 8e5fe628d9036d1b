#!/usr/bin/env python3
"""Seed the BioForge template catalog.

Usage:
    python scripts/seed_templates.py             # upsert into the configured Supabase project
    python scripts/seed_templates.py --dry-run   # list what would be written
"""

from __future__ import annotations

import argparse
import sys

from bio_forge.core.errors import BioForgeError
from bio_forge.db.client import get_supabase_client
from bio_forge.db.models import TEMPLATES

TEMPLATE_CATALOG = [
    {
        "template_type": "bio",
        "name": "Executive Summary",
        "content": (
            "A concise, results-focused biography for founders and executives. "
            "Leads with current role, then two or three headline achievements."
        ),
        "tone": "professional",
        "premium": False,
    },
    {
        "template_type": "bio",
        "name": "Conference Speaker",
        "content": (
            "Written to be read aloud by a host. Opens with the speaker's expertise, "
            "closes with the talk's relevance to the audience."
        ),
        "tone": "friendly",
        "premium": False,
    },
    {
        "template_type": "bio",
        "name": "Academic Profile",
        "content": (
            "Research interests, affiliations and notable publications, "
            "in the third person."
        ),
        "tone": "academic",
        "premium": True,
    },
    {
        "template_type": "bio",
        "name": "Founder Story",
        "content": "A narrative arc from origin to mission, for About pages and podcasts.",
        "tone": "storytelling",
        "premium": True,
    },
    {
        "template_type": "schema",
        "name": "Person (basic)",
        "content": "schema.org Person with name, jobTitle, url and sameAs links.",
        "tone": None,
        "premium": False,
    },
    {
        "template_type": "schema",
        "name": "Organization (basic)",
        "content": "schema.org Organization with name, url and sameAs links.",
        "tone": None,
        "premium": False,
    },
    {
        "template_type": "press_kit",
        "name": "Media One-Pager",
        "content": "Short bio, full bio and contact details on a single page.",
        "tone": "formal",
        "premium": False,
    },
    {
        "template_type": "press_kit",
        "name": "Launch Kit",
        "content": "Press kit layout tuned for product and book launches.",
        "tone": "professional",
        "premium": True,
    },
]


def seed(dry_run: bool = False) -> int:
    """Upsert every catalog entry. Returns the number of failures."""
    db = None if dry_run else get_supabase_client()
    failures = 0
    for template in TEMPLATE_CATALOG:
        label = f"{template['template_type']}/{template['name']}"
        if db is None:
            print(f"  Would seed: {label}")
            continue
        try:
            db.upsert(TEMPLATES, template, on_conflict="template_type,name")
        except BioForgeError as e:
            failures += 1
            print(f"  FAILED {label}: {e.message}", file=sys.stderr)
            continue
        print(f"  Seeded: {label}")
    return failures


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the BioForge template catalog")
    parser.add_argument("--dry-run", action="store_true", help="Print entries without writing")
    args = parser.parse_args()

    print(f"Seeding {len(TEMPLATE_CATALOG)} templates ...")
    failures = seed(dry_run=args.dry_run)
    print("Done." if not failures else f"Done with {failures} failure(s).")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
