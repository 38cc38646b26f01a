"""Load and query the audit policy.

The policy is an optional YAML file overlaid onto the defaults in
``org_config``. Recognised keys:

    organisation: EmbarkStudios
    allowed_non_member_maintainers: [emilk]
    ignored_repos: [.github, opensource]
    ecosystem_tag: rust
    ownership_file: .github/CODEOWNERS
    branches: [main, master]
    max_concurrency: 32
    website: {repo: opensource-website, branch: main, path: data.json}
    ecosystem: {repo: rust-ecosystem, branch: main, path: README.md}
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from oss_audit import org_config
from oss_audit.paths import policy_path as _default_policy_path


@dataclass(frozen=True)
class Source:
    """A file in a repository of the organisation."""

    repo: str
    branch: str
    path: str


@dataclass(frozen=True)
class Policy:
    """Immutable governance configuration shared by every check."""

    organisation: str = org_config.ORGANISATION
    allowed_non_member_maintainers: frozenset[str] = org_config.ALLOWED_NON_MEMBER_MAINTAINERS
    ignored_repos: frozenset[str] = org_config.IGNORED_REPOS
    ecosystem_tag: str = org_config.ECOSYSTEM_TAG
    ownership_file: str = org_config.OWNERSHIP_FILE
    branches: tuple[str, ...] = org_config.BRANCHES
    max_concurrency: int = org_config.MAX_CONCURRENCY
    website: Source = field(default_factory=lambda: Source(*org_config.source_location("website")))
    ecosystem: Source = field(default_factory=lambda: Source(*org_config.source_location("ecosystem")))

    def is_allowed_non_member(self, login: str) -> bool:
        return login in self.allowed_non_member_maintainers


def default_policy() -> Policy:
    """Return the built-in policy."""
    return Policy()


def load_policy(path: Path | str | None = None) -> Policy:
    """Load a policy YAML file and overlay it onto the defaults.

    Args:
        path: Path to the policy file. Defaults to ``paths.policy_path()``;
            a missing default file yields the built-in policy.

    Returns:
        The resulting Policy.

    Raises:
        FileNotFoundError: If an explicitly given file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If the document is not a mapping or a key is invalid.
    """
    if path is None:
        policy_file = _default_policy_path()
        if not policy_file.is_file():
            return default_policy()
    else:
        policy_file = Path(path)

    with open(policy_file) as f:
        data = yaml.safe_load(f)

    if data is None:
        return default_policy()
    if not isinstance(data, dict):
        raise ValueError(f"policy at {policy_file} is not a YAML mapping")

    return apply_overrides(default_policy(), data)


def apply_overrides(policy: Policy, data: dict) -> Policy:
    """Return ``policy`` with the keys of ``data`` applied."""
    unknown = set(data) - set(Policy.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown policy keys: {', '.join(sorted(unknown))}")

    changes: dict = {}
    for key in ("organisation", "ecosystem_tag", "ownership_file"):
        if key in data:
            changes[key] = str(data[key])
    for key in ("allowed_non_member_maintainers", "ignored_repos"):
        if key in data:
            changes[key] = frozenset(str(v) for v in data[key] or [])
    if "branches" in data:
        branches = tuple(str(b) for b in data["branches"] or [])
        if not branches:
            raise ValueError("branches must list at least one branch")
        changes["branches"] = branches
    if "max_concurrency" in data:
        limit = int(data["max_concurrency"])
        if limit < 0:
            raise ValueError("max_concurrency must not be negative")
        changes["max_concurrency"] = limit
    for key in ("website", "ecosystem"):
        if key in data:
            current = getattr(policy, key)
            override = data[key] or {}
            if not isinstance(override, dict):
                raise ValueError(f"{key} must be a mapping of repo/branch/path")
            changes[key] = Source(
                repo=str(override.get("repo", current.repo)),
                branch=str(override.get("branch", current.branch)),
                path=str(override.get("path", current.path)),
            )
    return replace(policy, **changes)
