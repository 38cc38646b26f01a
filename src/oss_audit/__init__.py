"""Governance audit for an organisation's open source projects."""

__version__ = "0.1.0"
