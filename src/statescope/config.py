"""Runtime settings for the analysis engine and its input loader.

Settings are plain constructor defaults. The CLI maps its options onto an
``AnalysisSettings`` instance; library callers build one directly.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

MAX_FILE_BYTES = 50 * 1024 * 1024
ACCEPTED_EXTENSIONS: tuple[str, ...] = (".tfstate", ".json")


@dataclass(frozen=True)
class AnalysisSettings:
    """Tunable limits for loading and analyzing a state document.

    Attributes:
        max_file_bytes: Largest state file the loader accepts.
        accepted_extensions: Lower-case file suffixes the loader accepts.
        max_attribute_depth: Nesting depth beyond which the attribute walk
            stops descending. Guards against adversarially deep documents.
        parallel_threshold: Minimum resource count before per-resource
            evaluation is spread across worker threads.
        max_workers: Worker threads for per-resource evaluation. ``None``
            or ``1`` keeps evaluation sequential.
    """

    max_file_bytes: int = MAX_FILE_BYTES
    accepted_extensions: tuple[str, ...] = ACCEPTED_EXTENSIONS
    max_attribute_depth: int = 256
    parallel_threshold: int = 500
    max_workers: int | None = None

    def with_workers(self, workers: int | None) -> AnalysisSettings:
        """Return a copy with ``max_workers`` replaced."""
        return replace(self, max_workers=workers)


DEFAULT_SETTINGS = AnalysisSettings()
