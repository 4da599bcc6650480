"""statescope exception hierarchy.

All public exceptions inherit from StateScopeError, giving callers a single
base class to catch when they want to handle any statescope-specific failure
without swallowing unrelated errors.

Only input and catalog problems surface as exceptions. Anomalies inside a
single resource instance (malformed attributes, unreadable policy documents)
are absorbed by the analysis engine and reported as findings or omissions.
"""


class StateScopeError(Exception):
    """Base exception for all statescope errors."""


class StateParseError(StateScopeError):
    """Raised when a state document cannot be read or decoded.

    Covers unreadable files and invalid JSON syntax.
    """


class StateShapeError(StateParseError):
    """Raised when a decoded state document has the wrong structure.

    The document lacks a resource list, or the list contains entries that
    are not resources. Fatal to the whole analysis: raised before any
    evaluation begins.
    """


class FileValidationError(StateParseError):
    """Raised when an input file is rejected before it is read.

    Covers unsupported file extensions and files over the size limit.
    """


class CatalogError(StateScopeError):
    """Raised when the hardening rule catalog cannot be loaded.

    Covers missing files, malformed YAML, a missing rule list, and
    duplicate rule identifiers.
    """


class AnalysisError(StateScopeError):
    """Raised when the analysis engine is handed input it cannot process.

    Per-instance anomalies never raise this; it is reserved for callers
    passing something other than a sequence of resources.
    """
