"""Notify module — failure reports sent to chat."""

from oss_audit.notify.slack import Block, notification_blocks, send_webhook

__all__ = [
    "Block",
    "notification_blocks",
    "send_webhook",
]
