"""Policy module — allow-lists, denylists and remote source locations."""

from oss_audit.policy.rules import Policy, Source, default_policy, load_policy

__all__ = [
    "Policy",
    "Source",
    "default_policy",
    "load_policy",
]
