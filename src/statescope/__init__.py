"""statescope: Security posture and dependency analysis for Terraform state snapshots."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
