"""Per-project governance checks.

A project must:
- list primary maintainers in CODEOWNERS who are public organisation
  members (or explicitly allowed outsiders)
- have a repository in the organisation that isn't archived
- be registered in the ecosystem README if it is tagged for that ecosystem
- be listed on the open source website

The checks run concurrently and each outcome is stored independently,
so one failing check never hides another.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from oss_audit.errors import AuditError, NotFoundError, PolicyViolation, cause_chain
from oss_audit.github.client import GitHubClient
from oss_audit.github.codeowners import CodeOwners
from oss_audit.github.models import WebsiteProject
from oss_audit.policy.rules import Policy
from oss_audit.validate.context import Context

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Outcome:
    """The success value or the error of one check."""

    value: Any = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> Outcome:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def _key(self) -> tuple:
        if self.error is None:
            return (True, self.value)
        chain = [self.error, *cause_chain(self.error)]
        return (False, tuple((type(e), str(e)) for e in chain))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def not_yet_checked() -> Outcome:
    return Outcome.failure(AuditError("This property has not yet been validated"))


@dataclass(frozen=True)
class Project:
    name: str
    tags: frozenset[str] = frozenset()
    maintainers: Outcome = field(default_factory=not_yet_checked)
    archive_status: Outcome = field(default_factory=not_yet_checked)
    ecosystem_status: Outcome = field(default_factory=not_yet_checked)
    website_status: Outcome = field(default_factory=not_yet_checked)

    @classmethod
    def from_website_project(cls, project: WebsiteProject) -> Project:
        return cls(name=project.name, tags=project.tags)

    def outcomes(self) -> list[Outcome]:
        return [self.maintainers, self.archive_status, self.ecosystem_status, self.website_status]

    def errors(self) -> list[Exception]:
        """Errors of the failed checks, in a fixed order."""
        return [o.error for o in self.outcomes() if o.error is not None]

    def has_errors(self) -> bool:
        return bool(self.errors())

    async def validate(self, context: Context, client: GitHubClient, policy: Policy) -> Project:
        """Run every check and return a project holding all four outcomes."""
        maintainers, archive_status, ecosystem_status, website_status = await asyncio.gather(
            capture(lookup_maintainers, self.name, context, client, policy),
            capture(check_archive_status, self.name, context, policy),
            capture(check_ecosystem_registration, self.name, self.tags, context, policy),
            capture(check_website_inclusion, self.name, context, policy),
        )
        return replace(
            self,
            maintainers=maintainers,
            archive_status=archive_status,
            ecosystem_status=ecosystem_status,
            website_status=website_status,
        )


async def capture(check: Callable[..., Any], *args: Any) -> Outcome:
    """Run a check, turning its return value or exception into an Outcome."""
    try:
        result = check(*args)
        if inspect.isawaitable(result):
            result = await result
    except AuditError as e:
        logger.debug("%s failed: %s", check.__name__, e)
        return Outcome.failure(e)
    except Exception as e:
        logger.exception("%s raised unexpectedly", check.__name__)
        return Outcome.failure(e)
    return Outcome.success(result)


# ── Checks ───────────────────────────────────────────────────────


async def download_codeowners(name: str, client: GitHubClient, policy: Policy) -> str:
    """Fetch CODEOWNERS from the first branch that serves it."""
    last_error: Exception | None = None
    for branch in policy.branches:
        try:
            return await asyncio.to_thread(
                client.download_repo_file, policy.organisation, name, branch, policy.ownership_file,
            )
        except Exception as e:
            logger.debug("No %s for %s on %s: %s", policy.ownership_file, name, branch, e)
            last_error = e
    raise AuditError("Unable to determine maintainers") from last_error


async def lookup_maintainers(
    name: str, context: Context, client: GitHubClient, policy: Policy,
) -> frozenset[str]:
    """Primary maintainers of a project, all of whom must be org members."""
    text = await download_codeowners(name, client, policy)
    try:
        codeowners = CodeOwners.parse(text)
    except AuditError as e:
        raise AuditError("Unable to determine maintainers") from e

    maintainers = codeowners.primary_maintainers()
    if not maintainers:
        raise PolicyViolation("No maintainers were found for * in the CODEOWNERS file")

    check_membership(maintainers, context.members, policy)
    return maintainers


def check_membership(maintainers: frozenset[str], members: frozenset[str], policy: Policy) -> None:
    """Fail if a maintainer is neither a public member nor allow-listed."""
    outsiders = sorted(
        login for login in maintainers - members
        if not policy.is_allowed_non_member(login)
    )
    if outsiders:
        raise PolicyViolation(
            f"Maintainers not public {policy.organisation} members: {', '.join(outsiders)}"
        )


def check_archive_status(name: str, context: Context, policy: Policy) -> None:
    repo = context.repos.get(name)
    if repo is None:
        raise NotFoundError(
            f"Unable to find project in the {policy.organisation} GitHub organisation"
        )
    if repo.archived:
        raise PolicyViolation("Project has been archived on GitHub")


def check_ecosystem_registration(
    name: str, tags: frozenset[str], context: Context, policy: Policy,
) -> None:
    """Projects tagged for the ecosystem must be mentioned in its README."""
    if policy.ecosystem_tag in tags and name not in context.ecosystem_doc:
        raise PolicyViolation(
            f"{policy.ecosystem_tag.capitalize()} project not in the {policy.ecosystem.repo} README"
        )


def check_website_inclusion(name: str, context: Context, policy: Policy) -> None:
    if not context.is_on_website(name):
        raise PolicyViolation(
            f"Project not included in {policy.website.repo} {policy.website.path}"
        )
