"""Validate module — organisation context, per-project checks, run orchestration."""

from oss_audit.validate.context import Context, build_context
from oss_audit.validate.project import Outcome, Project
from oss_audit.validate.runner import RunResult, validate_all, validate_one

__all__ = [
    "Context",
    "build_context",
    "Outcome",
    "Project",
    "RunResult",
    "validate_all",
    "validate_one",
]
