"""``statescope analyze <state-file>`` -- Security report for a state file.

Loads the state file, evaluates every resource against the hardening rule
catalog, resolves dependencies and prints the summary and findings.

Exit Codes:
    0 -- No finding at or above the severity threshold.
    1 -- One or more findings at or above the severity threshold.
    2 -- The state file or the rule catalog could not be loaded.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from statescope.config import DEFAULT_SETTINGS
from statescope.core.report import analyze_state, filter_findings, rank_findings
from statescope.core.rules import Severity, default_catalog, load_catalog
from statescope.core.state import load_state_file
from statescope.exceptions import StateScopeError

logger = logging.getLogger(__name__)

# Severity threshold mapping (string -> IntEnum)
_SEVERITY_MAP: dict[str, Severity] = {
    "low": Severity.LOW,
    "medium": Severity.MEDIUM,
    "high": Severity.HIGH,
    "critical": Severity.CRITICAL,
}


def fail(message: str, output_format: str) -> None:
    """Report a fatal input error in the requested format and exit 2."""
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")
    sys.exit(2)


@click.command("analyze")
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--severity-threshold",
    type=click.Choice(["low", "medium", "high", "critical"]),
    default="low",
    help="Minimum severity to report (default: low).",
)
@click.option(
    "--rules", "rules_path",
    type=click.Path(dir_okay=False),
    envvar="STATESCOPE_RULES",
    default=None,
    help="Hardening rule catalog (YAML). Defaults to the bundled catalog.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads for evaluating large state files.",
)
def analyze_command(
    state_file: str,
    output_format: str,
    severity_threshold: str,
    rules_path: str | None,
    workers: int | None,
) -> None:
    """Analyze a Terraform state file for security issues.

    Reads STATE_FILE (.tfstate or .json), evaluates every resource instance
    against the hardening rule catalog and reports findings ranked by
    severity, together with dependency counts and the security score.

    Exit code 0 if no findings reach the threshold, 1 otherwise.
    """
    settings = DEFAULT_SETTINGS.with_workers(workers)
    try:
        catalog = load_catalog(Path(rules_path)) if rules_path else default_catalog()
        document = load_state_file(Path(state_file), settings)
        report = analyze_state(document, catalog, settings)
    except StateScopeError as exc:
        logger.debug("Analysis aborted", exc_info=True)
        fail(str(exc), output_format)
        return

    threshold = _SEVERITY_MAP[severity_threshold]
    shown = rank_findings(filter_findings(report.findings, min_severity=threshold))

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(shown), indent=2))
    else:
        from statescope.cli.output import print_report
        print_report(report, shown)

    sys.exit(1 if shown else 0)
