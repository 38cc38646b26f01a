"""Environment resolution.

Resolves runtime inputs from environment variables, falling back to
conventional defaults.

Environment variables:
    OSS_AUDIT_POLICY — policy YAML file (default: ~/.config/oss-audit/policy.yaml)
    GITHUB_TOKEN — GitHub API token (default: unauthenticated)
    SLACK_WEBHOOK_URL — Slack incoming webhook for failure reports
"""

from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_POLICY = Path.home() / ".config" / "oss-audit" / "policy.yaml"


def policy_path() -> Path:
    """Return the path to the policy file (which need not exist)."""
    return Path(os.environ.get("OSS_AUDIT_POLICY", str(_DEFAULT_POLICY)))


def github_token() -> str | None:
    """Return the GitHub API token, or None for unauthenticated access."""
    return os.environ.get("GITHUB_TOKEN") or None


def slack_webhook_url() -> str | None:
    """Return the Slack webhook URL, if configured."""
    return os.environ.get("SLACK_WEBHOOK_URL") or None
