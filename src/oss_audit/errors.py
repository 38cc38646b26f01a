"""Error types for the audit engine.

Every failure carries its proximate causes through native exception
chaining, so reporting can walk ``__cause__`` to render the full chain.
"""

from __future__ import annotations


class AuditError(Exception):
    """Base class for all audit failures."""


class NotFoundError(AuditError):
    """A remote file, repository or project does not exist."""


class TransportError(AuditError):
    """Network failure, unexpected status code or undecodable response."""


class OwnershipParseError(AuditError):
    """A CODEOWNERS document is malformed."""


class PolicyViolation(AuditError):
    """A project breaks one of the governance rules."""


class ContextError(AuditError):
    """Organisation-wide data could not be gathered."""


def cause_chain(error: BaseException) -> list[BaseException]:
    """List the causes of ``error``, nearest first, excluding ``error`` itself."""
    chain = []
    cause = error.__cause__
    while cause is not None and cause not in chain:
        chain.append(cause)
        cause = cause.__cause__
    return chain
