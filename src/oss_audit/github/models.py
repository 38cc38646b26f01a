"""Records returned by the GitHub API and the website listing."""

from __future__ import annotations

from dataclasses import dataclass, field

from oss_audit.errors import TransportError


@dataclass(frozen=True)
class RepoInfo:
    """A repository of the organisation."""

    name: str
    archived: bool = False
    private: bool = False
    fork: bool = False

    @classmethod
    def from_json(cls, data: dict) -> RepoInfo:
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise TransportError(f"Unexpected repository record: {data!r}")
        return cls(
            name=data["name"],
            archived=bool(data.get("archived", False)),
            private=bool(data.get("private", False)),
            fork=bool(data.get("fork", False)),
        )

    def is_public_source_project(self, ignored: frozenset[str] = frozenset()) -> bool:
        """True for live, public, non-fork repos that aren't meta repos."""
        return not (self.archived or self.private or self.fork or self.name in ignored)


@dataclass(frozen=True)
class WebsiteProject:
    """An entry of the open source website's data.json."""

    name: str
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_json(cls, data: dict) -> WebsiteProject:
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise TransportError(f"Unexpected website project entry: {data!r}")
        return cls(name=data["name"], tags=frozenset(data.get("tags") or []))


def member_login(data: dict) -> str:
    """Extract the login of an organisation member record."""
    if not isinstance(data, dict) or not isinstance(data.get("login"), str):
        raise TransportError(f"Unexpected member record: {data!r}")
    return data["login"]


def parse_website_data(data: object) -> list[WebsiteProject]:
    """Parse the ``{"projects": [...]}`` document of the website."""
    if not isinstance(data, dict) or not isinstance(data.get("projects"), list):
        raise TransportError("Website data.json has no projects list")
    return [WebsiteProject.from_json(p) for p in data["projects"]]
