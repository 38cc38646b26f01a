"""GitHub module — transport client, API records and CODEOWNERS parsing."""

from oss_audit.github.client import GitHubClient, next_page_from_link_header
from oss_audit.github.codeowners import Assignment, CodeOwners
from oss_audit.github.models import RepoInfo, WebsiteProject

__all__ = [
    "GitHubClient",
    "next_page_from_link_header",
    "Assignment",
    "CodeOwners",
    "RepoInfo",
    "WebsiteProject",
]
