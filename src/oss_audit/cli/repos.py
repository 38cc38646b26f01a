"""Repository listing CLI commands."""

import argparse
import asyncio

from oss_audit.cli.common import SETTINGS_ERRORS, load_settings, print_error
from oss_audit.errors import ContextError


def cmd_repos_unlisted(args: argparse.Namespace) -> int:
    from oss_audit.validate.runner import unlisted_repos

    try:
        client, policy = load_settings(args)
    except SETTINGS_ERRORS as e:
        print_error(e)
        return 1
    try:
        names = asyncio.run(unlisted_repos(client, policy))
    except ContextError as e:
        print_error(e)
        return 1

    if not names:
        print("All public source repositories are listed on the website.")
        return 0

    print(f"Public source repositories missing from {policy.website.repo} ({len(names)}):")
    for name in names:
        print(f"  - {name}")
    return 1
