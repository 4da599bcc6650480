"""Rich output formatting helpers for the statescope CLI.

Severity Color Mapping:
    CRITICAL = bold red, HIGH = yellow, MEDIUM = cyan, LOW = green
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from statescope.core.analyzer.models import SecurityFinding
from statescope.core.dependency.graph import ResourceGraph
from statescope.core.report.pipeline import AnalysisReport
from statescope.core.rules.intent import classify_intent
from statescope.core.rules.models import HardeningRule, Severity

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "yellow",
    Severity.MEDIUM: "cyan",
    Severity.LOW: "green",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def score_style(score: int) -> str:
    if score >= 80:
        return "bold green"
    if score >= 50:
        return "yellow"
    return "bold red"


def print_report(report: AnalysisReport, findings: Sequence[SecurityFinding]) -> None:
    """Print the summary panel followed by the findings table.

    Args:
        report: Full analysis report (summary is taken from here).
        findings: Findings to list, already filtered and ranked.
    """
    summary = report.summary
    header = Text.assemble(
        ("Resources: ", "bold"), (str(summary.total_resources), ""),
        ("  Score: ", "bold"), (str(summary.security_score), score_style(summary.security_score)),
        ("  Critical: ", "bold"), (str(summary.critical_issues), "bold red" if summary.critical_issues else ""),
        ("  Dependencies: ", "bold"), (str(summary.dependency_counts.get("total", 0)), ""),
    )
    console.print(Panel(header, title=f"Terraform {report.document.terraform_version}"))
    if summary.providers:
        console.print(f"  Providers: {', '.join(summary.providers)}")
    if summary.regions:
        console.print(f"  Regions:   {', '.join(summary.regions)}")

    if not findings:
        console.print("[green]No findings at or above the severity threshold.[/green]")
        return

    table = Table(title="Security Findings", show_header=True, header_style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Resource", style="bold")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Remediation", style="dim")
    for finding in findings:
        table.add_row(
            Text(finding.severity.label.upper(), style=severity_style(finding.severity)),
            finding.resource,
            finding.category.value,
            finding.title,
            finding.remediation[:100],
        )
    console.print(table)
    counts = " | ".join(f"{label}: {count}" for label, count in summary.severity_counts.items())
    console.print(f"[bold]{len(findings)}[/bold] findings shown | {counts}")


def print_graph(graph: ResourceGraph) -> None:
    """Print graph nodes and links as two tables."""
    if not graph.nodes:
        console.print("[dim]No resources in graph.[/dim]")
        return

    nodes = Table(title="Resources", show_header=True, header_style="bold")
    nodes.add_column("Resource", style="bold")
    nodes.add_column("Provider", style="dim")
    nodes.add_column("Dependencies", justify="right")
    for node in graph.nodes:
        nodes.add_row(node.id, node.provider, str(node.dependency_count))
    console.print(nodes)

    if not graph.links:
        console.print("[dim]No dependencies found.[/dim]")
        return

    links = Table(title="Dependencies", show_header=True, header_style="bold")
    links.add_column("Source", style="bold")
    links.add_column("Target")
    links.add_column("Kind", justify="center")
    links.add_column("Relationship", style="dim")
    for link in graph.links:
        links.add_row(link.source, link.target, link.kind.value, link.relationship)
    console.print(links)


def print_rules(rules: Sequence[HardeningRule], version: str) -> None:
    """Print a table of catalog rules with their mapped category and intents."""
    if not rules:
        console.print("[dim]No rules match.[/dim]")
        return

    table = Table(title=f"Hardening Rules ({version})", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Resource Type")
    table.add_column("Severity", justify="center")
    table.add_column("Category")
    table.add_column("Intents", style="dim")
    for rule in rules:
        intents = ", ".join(sorted(intent.value for intent in classify_intent(rule)))
        table.add_row(
            rule.id,
            rule.resource_type,
            Text(rule.severity.label.upper(), style=severity_style(rule.severity)),
            rule.mapped_category.value,
            intents or "-",
        )
    console.print(table)
    console.print(f"[bold]{len(rules)}[/bold] rules")
