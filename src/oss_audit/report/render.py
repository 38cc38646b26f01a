"""Render project errors for the console and for notifications."""

from __future__ import annotations

from oss_audit.errors import cause_chain
from oss_audit.validate.project import Project

INDENT = "    "
PASS_MARK = "✔"
FAIL_MARK = "✖"


def cause_string(error: BaseException, indent: bool) -> str:
    """Write an error followed by its numbered "Caused by" chain."""
    prefix = INDENT if indent else ""
    lines = [f"{prefix}{error}"]
    causes = cause_chain(error)
    if causes:
        lines.append(f"{prefix}Caused by:")
        for i, cause in enumerate(causes):
            lines.append(f"{prefix}    {i}: {cause}")
    return "".join(line + "\n" for line in lines)


def render_errors(project: Project, indent: bool = True) -> str | None:
    """All of a project's errors in check order, or None if it has none."""
    errors = project.errors()
    if not errors:
        return None
    return "\n".join(cause_string(error, indent) for error in errors)


def status_line(project: Project) -> str:
    """Console status for a project: a pass line, or a fail line and errors."""
    errors = render_errors(project, indent=True)
    if errors is not None:
        return f"{FAIL_MARK} {project.name}\n{errors}"
    maintainers = ", ".join(sorted(project.maintainers.value or ()))
    return f"{PASS_MARK} {project.name} ({maintainers})"
