"""statescope CLI -- Security posture and dependency analysis of Terraform state.

Entry point for the ``statescope`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    analyze -- Security findings, score and summary for a state file.
    graph   -- Resource dependency graph for a state file.
    rules   -- List the hardening rule catalog.

Usage::

    statescope analyze terraform.tfstate
    statescope analyze terraform.tfstate --format json --severity-threshold high
    statescope -v graph terraform.tfstate --resource-type aws_instance
    statescope rules --resource-type aws_s3_bucket
"""

from __future__ import annotations

import click

from statescope import __version__
from statescope.cli.analyze import analyze_command
from statescope.cli.graph_cmd import graph_command
from statescope.cli.logging_setup import configure_logging
from statescope.cli.rules_cmd import rules_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase log output on stderr (-v info, -vv debug).",
)
def cli(verbose: int) -> None:
    """statescope: Security and dependency analysis for Terraform state files.

    Evaluates resources against a catalog of hardening rules, reconstructs
    explicit and implicit dependencies, and scores the overall posture.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(analyze_command)
cli.add_command(graph_command)
cli.add_command(rules_command)
