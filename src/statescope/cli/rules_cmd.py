"""``statescope rules`` -- List the hardening rule catalog."""

from __future__ import annotations

import json
from pathlib import Path

import click

from statescope.cli.analyze import fail
from statescope.core.rules import classify_intent, default_catalog, load_catalog
from statescope.exceptions import CatalogError


@click.command("rules")
@click.option(
    "--resource-type",
    default=None,
    help="Only list rules evaluated for this resource type (wildcard rules included).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--rules", "rules_path",
    type=click.Path(dir_okay=False),
    envvar="STATESCOPE_RULES",
    default=None,
    help="Hardening rule catalog (YAML). Defaults to the bundled catalog.",
)
def rules_command(resource_type: str | None, output_format: str, rules_path: str | None) -> None:
    """List hardening rules with their mapped category and detected intents."""
    try:
        catalog = load_catalog(Path(rules_path)) if rules_path else default_catalog()
    except CatalogError as exc:
        fail(str(exc), output_format)
        return

    rules = catalog.rules_for(resource_type) if resource_type else catalog.rules

    if output_format == "json":
        click.echo(json.dumps({
            "version": catalog.version,
            "rules": [
                {
                    "id": rule.id,
                    "title": rule.title,
                    "resource_type": rule.resource_type,
                    "severity": rule.severity.label,
                    "category": rule.mapped_category.value,
                    "intents": sorted(intent.value for intent in classify_intent(rule)),
                }
                for rule in rules
            ],
        }, indent=2))
    else:
        from statescope.cli.output import print_rules
        print_rules(rules, catalog.version)
