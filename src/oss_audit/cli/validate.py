"""Validation CLI commands."""

import argparse
import asyncio

from oss_audit.cli.common import SETTINGS_ERRORS, load_settings, print_error
from oss_audit.errors import AuditError, ContextError


def cmd_validate_all(args: argparse.Namespace) -> int:
    from oss_audit.notify.slack import notification_blocks, send_webhook
    from oss_audit.paths import slack_webhook_url
    from oss_audit.report.render import status_line
    from oss_audit.validate.runner import validate_all

    try:
        client, policy = load_settings(args)
    except SETTINGS_ERRORS as e:
        print_error(e)
        return 1
    try:
        result = asyncio.run(validate_all(client, policy))
    except ContextError as e:
        print_error(e)
        return 1

    for project in result.projects:
        print(status_line(project))

    if result.passed:
        return 0

    webhook = args.slack_webhook_url or slack_webhook_url()
    if webhook:
        try:
            send_webhook(webhook, notification_blocks(result.failing, policy.organisation))
        except AuditError as e:
            print_error(e)

    print(f"\nERROR: {len(result.failing)} of {len(result.projects)} projects "
          "do not conform to the guidelines")
    return 1


def cmd_validate(args: argparse.Namespace) -> int:
    from oss_audit.report.render import status_line
    from oss_audit.validate.runner import validate_one

    try:
        client, policy = load_settings(args)
    except SETTINGS_ERRORS as e:
        print_error(e)
        return 1
    try:
        project = asyncio.run(validate_one(args.name, client, policy))
    except ContextError as e:
        print_error(e)
        return 1

    print(status_line(project))
    if project.has_errors():
        print("\nERROR: The project does not conform to the guidelines")
        return 1
    return 0
