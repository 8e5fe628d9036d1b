"""BioForge CLI — bioforge command."""

from __future__ import annotations

import json
from typing import Any

import click

from bio_forge.cli.client import BioForgeClient
from bio_forge.db.models import BioType, Tone


def _format_table(rows: list[dict], columns: list[str]) -> str:
    """Simple table formatter."""
    if not rows:
        return "No results."
    widths = {c: len(c) for c in columns}
    for row in rows:
        for c in columns:
            widths[c] = max(widths[c], len(str(row.get(c, ""))))

    header = "  ".join(c.upper().ljust(widths[c]) for c in columns)
    separator = "  ".join("-" * widths[c] for c in columns)
    lines = [header, separator]
    for row in rows:
        lines.append("  ".join(str(row.get(c, "")).ljust(widths[c]) for c in columns))
    return "\n".join(lines)


@click.group()
@click.option("--api", default="http://localhost:8400", envvar="BIOFORGE_API", help="API base URL")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--token", default=None, envvar="BIOFORGE_TOKEN", help="Auth token")
@click.pass_context
def cli(ctx: click.Context, api: str, output_format: str, token: str | None) -> None:
    """BioForge CLI — profiles, biographies, schema and press kits."""
    ctx.obj = BioForgeClient(base_url=api, auth_token=token)
    ctx.meta["output_format"] = output_format


def _output(ctx: click.Context, data: Any, columns: list[str] | None = None) -> None:
    fmt = ctx.meta.get("output_format", "table")
    if isinstance(data, list) and columns and fmt == "table":
        click.echo(_format_table(data, columns))
    else:
        click.echo(json.dumps(data, indent=2, default=str))


# --- Profile commands ---


@cli.group()
def profile() -> None:
    """Manage biography profiles."""


@profile.command("list")
@click.pass_context
def profile_list(ctx: click.Context) -> None:
    """List your profiles."""
    client: BioForgeClient = ctx.obj
    _output(ctx, client.list_profiles(), ["id", "name", "type", "slug", "published"])


@profile.command("create")
@click.option("--name", required=True)
@click.option("--type", "profile_type", type=click.Choice(["person", "organization", "brand"]), default="person")
@click.option("--title", "job_title", default=None)
@click.option("--website", default=None)
@click.option("--notes", "bio_notes", default=None)
@click.option("--social", "social_links", multiple=True, help="Social profile URL (repeatable)")
@click.pass_context
def profile_create(
    ctx: click.Context,
    name: str,
    profile_type: str,
    job_title: str | None,
    website: str | None,
    bio_notes: str | None,
    social_links: tuple,
) -> None:
    """Create a profile."""
    client: BioForgeClient = ctx.obj
    data: dict[str, Any] = {"name": name, "type": profile_type, "social_links": list(social_links)}
    for key, value in (("job_title", job_title), ("website", website), ("bio_notes", bio_notes)):
        if value:
            data[key] = value
    _output(ctx, client.create_profile(data))


@profile.command("show")
@click.argument("profile_id")
@click.pass_context
def profile_show(ctx: click.Context, profile_id: str) -> None:
    """Show a profile."""
    client: BioForgeClient = ctx.obj
    _output(ctx, client.get_profile(profile_id))


@profile.command("delete")
@click.argument("profile_id")
@click.confirmation_option(prompt="Delete this profile and everything generated for it?")
@click.pass_context
def profile_delete(ctx: click.Context, profile_id: str) -> None:
    """Delete a profile."""
    client: BioForgeClient = ctx.obj
    client.delete_profile(profile_id)
    click.echo(f"Deleted profile '{profile_id}'")


@profile.command("publish")
@click.argument("profile_id")
@click.option("--off", "unpublish", is_flag=True, help="Unpublish instead")
@click.pass_context
def profile_publish(ctx: click.Context, profile_id: str, unpublish: bool) -> None:
    """Publish (or unpublish) a profile page."""
    client: BioForgeClient = ctx.obj
    result = client.set_published(profile_id, not unpublish)
    state = "published" if result.get("published") else "unpublished"
    click.echo(f"Profile {state} (slug: {result.get('slug')})")


# --- Biographies ---


@cli.command()
@click.argument("profile_id")
@click.option(
    "--type", "bio_types", multiple=True, required=True,
    type=click.Choice([b.value for b in BioType]),
)
@click.option("--tone", type=click.Choice([t.value for t in Tone]), default=Tone.PROFESSIONAL.value)
@click.pass_context
def generate(ctx: click.Context, profile_id: str, bio_types: tuple, tone: str) -> None:
    """Generate biography variants for a profile."""
    client: BioForgeClient = ctx.obj
    result = client.generate(profile_id, list(bio_types), tone)
    if ctx.meta.get("output_format") == "json":
        _output(ctx, result)
        return
    for bio in result.get("biographies", []):
        click.echo(f"## {bio['bio_type']} ({bio['tone']})")
        click.echo(bio["content"])
        click.echo("")
    for failure in result.get("failures", []):
        click.echo(f"FAILED {failure['bio_type']}: {failure['error']}", err=True)


@cli.command()
@click.argument("profile_id")
@click.pass_context
def bios(ctx: click.Context, profile_id: str) -> None:
    """List stored biographies for a profile."""
    client: BioForgeClient = ctx.obj
    _output(ctx, client.list_biographies(profile_id), ["bio_type", "tone", "generated_at"])


@cli.command()
@click.argument("profile_id")
@click.pass_context
def schema(ctx: click.Context, profile_id: str) -> None:
    """Regenerate and print a profile's JSON-LD snippet."""
    client: BioForgeClient = ctx.obj
    result = client.generate_schema(profile_id)
    click.echo(result.get("schema_text", ""))


# --- Press kits ---


@cli.group()
def kit() -> None:
    """Manage press kits."""


@kit.command("publish")
@click.argument("profile_id")
@click.option("--no-short-bio", is_flag=True)
@click.option("--no-long-bio", is_flag=True)
@click.option("--no-images", is_flag=True)
@click.option("--no-contacts", is_flag=True)
@click.pass_context
def kit_publish(
    ctx: click.Context,
    profile_id: str,
    no_short_bio: bool,
    no_long_bio: bool,
    no_images: bool,
    no_contacts: bool,
) -> None:
    """Save press kit settings and publish it."""
    client: BioForgeClient = ctx.obj
    result = client.publish_press_kit(
        profile_id,
        {
            "include_short_bio": not no_short_bio,
            "include_long_bio": not no_long_bio,
            "include_images": not no_images,
            "include_contacts": not no_contacts,
        },
    )
    click.echo(f"Press kit published at /kit/{result.get('slug')}")


@kit.command("download")
@click.argument("slug")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False), default=None)
@click.pass_context
def kit_download(ctx: click.Context, slug: str, output_path: str | None) -> None:
    """Download a published press kit as text."""
    client: BioForgeClient = ctx.obj
    text = client.download_press_kit(slug)
    if output_path:
        with open(output_path, "w") as f:
            f.write(text)
        click.echo(f"Saved press kit to {output_path}")
    else:
        click.echo(text, nl=False)


# --- Account ---


@cli.command()
@click.pass_context
def account(ctx: click.Context) -> None:
    """Show your account, plan and usage."""
    client: BioForgeClient = ctx.obj
    data = client.get_account()
    data["usage"] = client.usage_summary()
    _output(ctx, data)


@cli.command()
@click.argument("plan", type=click.Choice(["pro", "agency"]))
@click.pass_context
def upgrade(ctx: click.Context, plan: str) -> None:
    """Start a plan upgrade checkout."""
    client: BioForgeClient = ctx.obj
    result = client.checkout(plan)
    if result.get("checkout_url"):
        click.echo(f"Complete checkout at: {result['checkout_url']}")
    else:
        click.echo(result.get("message") or "Payment integration is not configured.")


@cli.command()
@click.option("--type", "template_type", default=None)
@click.option("--free-only", is_flag=True)
@click.pass_context
def templates(ctx: click.Context, template_type: str | None, free_only: bool) -> None:
    """Browse the template catalog."""
    client: BioForgeClient = ctx.obj
    params: dict[str, Any] = {}
    if template_type:
        params["type"] = template_type
    if free_only:
        params["premium"] = False
    _output(ctx, client.list_templates(**params), ["template_type", "name", "tone", "premium"])


if __name__ == "__main__":
    cli()
