"""Command-line interface for oss-audit.

Usage:
    oss-audit validate-all [--slack-webhook-url URL]
    oss-audit validate <name>
    oss-audit repos unlisted

Global options:
    --policy PATH    Policy YAML (default: $OSS_AUDIT_POLICY)
    --token TOKEN    GitHub API token (default: $GITHUB_TOKEN)
    --verbose        Debug logging
"""

import argparse
import logging
import sys

from oss_audit.cli.repos import cmd_repos_unlisted
from oss_audit.cli.validate import cmd_validate, cmd_validate_all


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oss-audit",
        description="Audit an organisation's open source projects against its governance rules",
    )
    parser.add_argument(
        "--policy", default=None,
        help="Path to policy YAML",
    )
    parser.add_argument(
        "--token", default=None,
        help="GitHub API token",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    # validate-all
    va = sub.add_parser(
        "validate-all", help="Validate every open source project of the organisation",
    )
    va.add_argument(
        "--slack-webhook-url", default=None,
        help="Post failures to this Slack webhook (default: $SLACK_WEBHOOK_URL)",
    )

    # validate
    v = sub.add_parser("validate", help="Validate one project of the organisation")
    v.add_argument("name", help="Repository name")

    # repos
    repos = sub.add_parser("repos", help="Repository listings")
    repos_sub = repos.add_subparsers(dest="subcommand")
    repos_sub.add_parser(
        "unlisted", help="Public source repos missing from the website",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    dispatch = {
        ("validate-all", ""): cmd_validate_all,
        ("validate", ""): cmd_validate,
        ("repos", "unlisted"): cmd_repos_unlisted,
    }

    subcommand: str | None = getattr(args, "subcommand", None)
    handler = dispatch.get((args.command, subcommand or ""))
    if handler:
        return handler(args)

    parser.parse_args([args.command, "--help"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
