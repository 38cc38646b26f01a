"""Canonical organisation settings — single source of truth.

All default repository locations, allow-lists and denylists live here.
Nothing else should hard-code organisation names or file paths; the
policy layer reads these as its defaults.
"""

from __future__ import annotations

ORGANISATION = "EmbarkStudios"

# Each remote source: repo → branch/path of the file fetched from it
SOURCES: dict[str, dict[str, str]] = {
    "website":   {"repo": "opensource-website", "branch": "main", "path": "data.json"},
    "ecosystem": {"repo": "rust-ecosystem",     "branch": "main", "path": "README.md"},
}

OWNERSHIP_FILE = ".github/CODEOWNERS"

# Tried in order when fetching the ownership file
BRANCHES = ("main", "master")

ECOSYSTEM_TAG = "rust"

# Maintainers allowed to stay on as owners without public org membership.
# emilk built puffin and poll-promise while at Embark and co-maintains them.
ALLOWED_NON_MEMBER_MAINTAINERS = frozenset({"emilk"})

# Meta repositories that never count as open source projects
IGNORED_REPOS = frozenset({
    ".github",
    "opensource",
    "opensource-website",
    "rust-ecosystem",
    "rfcs",
})

MAX_CONCURRENCY = 32


def source_location(kind: str) -> tuple[str, str, str]:
    """(repo, branch, path) for a remote source."""
    src = SOURCES[kind]
    return src["repo"], src["branch"], src["path"]
