# src/deploy/redirects.py - v1
"""Redirect rule loading.

A redirects file is a JSON array of ``{"url": ..., "redirect_to": ...}``
objects, kept in order.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter

from sitesync.deploy.models import RedirectRule

logger = logging.getLogger(__name__)

_RULES_ADAPTER = TypeAdapter(list[RedirectRule])


def parse_redirects(data: str | bytes) -> list[RedirectRule]:
    """Validate a JSON document into redirect rules.

    Raises:
        pydantic.ValidationError: If the document is not a list of rules.
    """
    return _RULES_ADAPTER.validate_json(data)


def load_redirects(path: Path | str) -> list[RedirectRule]:
    """Read redirect rules from a JSON file."""
    path = Path(path).expanduser()
    rules = parse_redirects(path.read_bytes())
    logger.info("Loaded %d redirect rules from %s", len(rules), path)
    return rules
