"""Validate the organisation's projects against the shared context."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

from oss_audit.github.client import GitHubClient
from oss_audit.policy.rules import Policy
from oss_audit.validate.context import Context, build_context
from oss_audit.validate.project import Project

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Validated projects, in listing order."""

    projects: list[Project] = field(default_factory=list)

    @property
    def failing(self) -> list[Project]:
        return [p for p in self.projects if p.has_errors()]

    @property
    def passed(self) -> bool:
        return not self.failing


def project_list(context: Context, policy: Policy) -> list[Project]:
    """Projects listed on the website, then unlisted public source repos."""
    projects = [Project.from_website_project(p) for p in context.website_projects]
    projects.extend(Project(name=repo.name) for repo in context.unlisted_repos(policy))
    return projects


async def validate_projects(
    projects: list[Project], context: Context, client: GitHubClient, policy: Policy,
) -> list[Project]:
    """Validate projects concurrently, at most ``policy.max_concurrency`` at once.

    Results keep the order of ``projects``.
    """
    limit = (
        asyncio.Semaphore(policy.max_concurrency)
        if policy.max_concurrency > 0
        else contextlib.nullcontext()
    )

    async def run(project: Project) -> Project:
        async with limit:
            return await project.validate(context, client, policy)

    return list(await asyncio.gather(*(run(p) for p in projects)))


async def validate_all(client: GitHubClient, policy: Policy) -> RunResult:
    """Gather context, then validate every project of the organisation.

    Raises:
        ContextError: If the organisation context can't be built.
    """
    context = await build_context(client, policy)
    projects = project_list(context, policy)
    logger.info("Validating %d projects", len(projects))
    return RunResult(await validate_projects(projects, context, client, policy))


async def validate_one(name: str, client: GitHubClient, policy: Policy) -> Project:
    """Validate a single project, tagged as the website lists it."""
    context = await build_context(client, policy)
    listed = context.website_project(name)
    project = Project.from_website_project(listed) if listed else Project(name=name)
    return await project.validate(context, client, policy)


async def unlisted_repos(client: GitHubClient, policy: Policy) -> list[str]:
    context = await build_context(client, policy)
    return [repo.name for repo in context.unlisted_repos(policy)]
