"""Report assembly: summary statistics, finding helpers and the pipeline.

Submodules
----------
- ``findings``: ``rank_findings``, ``filter_findings``, ``severity_counts``.
- ``summary``: ``ReportSummary`` and ``summarize``.
- ``pipeline``: ``AnalysisReport`` and ``analyze_state``.
"""

from statescope.core.report.findings import filter_findings, rank_findings, severity_counts
from statescope.core.report.pipeline import AnalysisReport, analyze_state
from statescope.core.report.summary import ReportSummary, provider_name, summarize

__all__ = [
    "AnalysisReport",
    "ReportSummary",
    "analyze_state",
    "filter_findings",
    "provider_name",
    "rank_findings",
    "severity_counts",
    "summarize",
]
