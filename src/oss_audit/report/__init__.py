"""Report module — console and notification rendering of project errors."""

from oss_audit.report.render import cause_string, render_errors, status_line

__all__ = [
    "cause_string",
    "render_errors",
    "status_line",
]
