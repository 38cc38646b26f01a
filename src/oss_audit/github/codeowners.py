"""Parse CODEOWNERS documents.

Only the owners of the catch-all ``*`` pattern are used, to find a
project's primary maintainers. Glob matching of other patterns is not
supported.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from oss_audit.errors import OwnershipParseError

WILDCARD = "*"


@dataclass(frozen=True)
class Assignment:
    """One CODEOWNERS line: a git-style file pattern and its owners."""

    file_pattern: str
    owners: frozenset[str]

    @classmethod
    def from_line(cls, line: str) -> Assignment:
        tokens = line.split()
        if not tokens:
            raise OwnershipParseError("No file pattern for code owners line")
        file_pattern, names = tokens[0], tokens[1:]
        try:
            owners = frozenset(validate_name_format(name) for name in names)
        except OwnershipParseError as e:
            raise OwnershipParseError(f"Unable to parse code owners for {file_pattern}") from e
        if not owners:
            raise OwnershipParseError(f"File pattern `{file_pattern}` has no owners")
        return cls(file_pattern=file_pattern, owners=owners)


def validate_name_format(name: str) -> str:
    """Strip the leading ``@`` from an owner, rejecting names without it."""
    if not name.startswith("@"):
        raise OwnershipParseError(f"Code owner `{name}` does not start with an @")
    login = name[1:]
    if not login or login.startswith("@"):
        raise OwnershipParseError(f"Code owner `{name}` is not a valid name")
    return login


@dataclass(frozen=True)
class CodeOwners:
    """A parsed CODEOWNERS document.

    Assignments are kept in declaration order rather than in a dict, so a
    pattern declared twice keeps both entries.
    """

    assignments: tuple[Assignment, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, source: str) -> CodeOwners:
        """Parse a whole document; the first malformed line aborts parsing.

        Raises:
            OwnershipParseError: naming the file pattern of the bad line.
        """
        assignments = []
        for raw in source.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            assignments.append(Assignment.from_line(line))
        return cls(assignments=tuple(assignments))

    def owners_for(self, file_pattern: str) -> frozenset[str] | None:
        """Owners of the first assignment declared for exactly ``file_pattern``."""
        for assignment in self.assignments:
            if assignment.file_pattern == file_pattern:
                return assignment.owners
        return None

    def primary_maintainers(self) -> frozenset[str] | None:
        """Owners of the ``*`` pattern; the first such line wins."""
        return self.owners_for(WILDCARD)
