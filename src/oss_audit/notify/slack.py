"""Slack incoming-webhook notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from oss_audit.errors import TransportError
from oss_audit.report.render import render_errors
from oss_audit.validate.project import Project

logger = logging.getLogger(__name__)

TIMEOUT = 30

HEADER = (
    "The following {org} open source projects have been found to "
    "have maintainership issues."
)
FOOTER = "This message was generated by the oss-audit tool."


@dataclass(frozen=True)
class Block:
    """A Slack layout block: a divider when ``text`` is None, else a section."""

    text: str | None = None

    def to_json(self) -> dict:
        if self.text is None:
            return {"type": "divider"}
        return {
            "type": "section",
            "text": {"type": "mrkdwn", "text": self.text},
        }


DIVIDER = Block()


def blocks_json(blocks: list[Block]) -> dict:
    return {"blocks": [b.to_json() for b in blocks]}


def project_block(project: Project, org: str) -> Block | None:
    errors = render_errors(project, indent=False)
    if errors is None:
        return None
    name = project.name
    return Block(
        f":red_circle: *<https://github.com/{org}/{name}|{name}>*\n```{errors}```"
    )


def notification_blocks(projects: list[Project], org: str) -> list[Block]:
    """Header, one block per failing project, footer."""
    blocks = [Block(HEADER.format(org=org)), DIVIDER]
    for project in projects:
        block = project_block(project, org)
        if block is not None:
            blocks.append(block)
    blocks.extend([DIVIDER, Block(FOOTER)])
    return blocks


def send_webhook(url: str, blocks: list[Block], session: requests.Session | None = None) -> None:
    """POST blocks to a Slack webhook.

    Raises:
        TransportError: If the request fails or Slack rejects it.
    """
    poster = session or requests
    logger.info("Sending %d blocks to Slack", len(blocks))
    try:
        response = poster.post(url, json=blocks_json(blocks), timeout=TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise TransportError("Unable to send webhook to Slack") from e
