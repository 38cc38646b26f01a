"""Organisation-wide data shared by every project check.

Fetched once per run so the per-project checks don't each download the
same data and run into rate limits. Immutable once built.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from oss_audit.errors import AuditError, ContextError
from oss_audit.github.client import GitHubClient
from oss_audit.github.models import RepoInfo, WebsiteProject, parse_website_data
from oss_audit.policy.rules import Policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Context:
    """Read-only facts about the organisation."""

    members: frozenset[str]
    repos: Mapping[str, RepoInfo]
    ecosystem_doc: str
    website_projects: tuple[WebsiteProject, ...] = field(default_factory=tuple)

    @classmethod
    def create(
        cls,
        members: Iterable[str],
        repos: Mapping[str, RepoInfo],
        ecosystem_doc: str,
        website_projects: Iterable[WebsiteProject] = (),
    ) -> Context:
        return cls(
            members=frozenset(members),
            repos=MappingProxyType(dict(repos)),
            ecosystem_doc=ecosystem_doc,
            website_projects=tuple(website_projects),
        )

    def website_project(self, name: str) -> WebsiteProject | None:
        for project in self.website_projects:
            if project.name == name:
                return project
        return None

    def is_on_website(self, name: str) -> bool:
        return self.website_project(name) is not None

    def unlisted_repos(self, policy: Policy) -> list[RepoInfo]:
        """Active public source repos missing from the website, by name."""
        return [
            repo for name, repo in sorted(self.repos.items())
            if repo.is_public_source_project(policy.ignored_repos)
            and not self.is_on_website(name)
        ]


def download_website_projects(client: GitHubClient, policy: Policy) -> list[WebsiteProject]:
    """Fetch the open source website's project listing."""
    src = policy.website
    try:
        data = client.download_repo_json_file(policy.organisation, src.repo, src.branch, src.path)
        return parse_website_data(data)
    except AuditError as e:
        raise AuditError(f"Unable to get list of open source {policy.organisation} projects") from e


async def build_context(client: GitHubClient, policy: Policy) -> Context:
    """Fetch members, repositories, ecosystem README and website listing.

    All four requests run concurrently and are joined together. If any of
    them fails the whole build fails with the first failure in that order;
    no partial context is returned.

    Raises:
        ContextError: wrapping the failed fetch.
    """
    org = policy.organisation
    eco = policy.ecosystem
    logger.info("Gathering organisation context for %s", org)

    results = await asyncio.gather(
        asyncio.to_thread(client.public_organisation_members, org),
        asyncio.to_thread(client.organisation_repos, org),
        asyncio.to_thread(client.download_repo_file, org, eco.repo, eco.branch, eco.path),
        asyncio.to_thread(download_website_projects, client, policy),
        return_exceptions=True,
    )

    for result in results:
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            raise ContextError(f"Unable to gather context for {org}") from result

    members, repos, ecosystem_doc, website_projects = results
    logger.info(
        "Context: %d members, %d repos, %d website projects",
        len(members), len(repos), len(website_projects),
    )
    return Context.create(members, repos, ecosystem_doc, website_projects)
