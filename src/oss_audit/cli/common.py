"""Settings shared by the CLI commands."""

import argparse
import sys

import yaml

from oss_audit.github.client import GitHubClient
from oss_audit.paths import github_token
from oss_audit.policy.rules import Policy, load_policy
from oss_audit.report.render import cause_string

# Raised by load_settings for an unreadable or invalid policy file
SETTINGS_ERRORS = (OSError, ValueError, yaml.YAMLError)


def load_settings(args: argparse.Namespace) -> tuple[GitHubClient, Policy]:
    """Build the GitHub client and policy from args and environment."""
    policy = load_policy(args.policy)
    client = GitHubClient(token=args.token or github_token())
    return client, policy


def print_error(error: BaseException) -> None:
    print(f"ERROR: {cause_string(error, indent=False)}", end="", file=sys.stderr)
