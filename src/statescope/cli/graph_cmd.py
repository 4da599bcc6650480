"""``statescope graph <state-file>`` -- Dependency graph of a state file.

Exit Codes:
    0 -- Graph produced.
    2 -- The state file could not be loaded.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from statescope.cli.analyze import fail
from statescope.config import DEFAULT_SETTINGS
from statescope.core.dependency import DependencyResolver, build_graph
from statescope.core.state import load_state_file
from statescope.exceptions import StateScopeError


@click.command("graph")
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--resource-type",
    default=None,
    help="Only show resources of this type and the links between them.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def graph_command(state_file: str, resource_type: str | None, output_format: str) -> None:
    """Show the resource dependency graph of a Terraform state file.

    Explicit dependencies come from depends_on; implicit ones from
    ${type.name} references inside attribute values.
    """
    try:
        document = load_state_file(Path(state_file), DEFAULT_SETTINGS)
    except StateScopeError as exc:
        fail(str(exc), output_format)
        return

    edges = DependencyResolver(DEFAULT_SETTINGS).resolve(document.resources)
    graph = build_graph(document.resources, edges)
    if resource_type:
        graph = graph.filter_by_type(resource_type)

    if output_format == "json":
        payload = graph.to_dict()
        payload["resource_types"] = graph.resource_types()
        click.echo(json.dumps(payload, indent=2))
    else:
        from statescope.cli.output import print_graph
        print_graph(graph)
