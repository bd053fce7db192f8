from __future__ import annotations

import getpass
import logging
import os

log = logging.getLogger(__name__)

DEFAULT_OPERATOR_ID = "operator"


def resolve_operator_id() -> str:
    """Who transfers are recorded against: ``OPERATOR_ID``, else the login name."""

    configured = (os.getenv("OPERATOR_ID") or "").strip()
    if configured:
        return configured
    try:
        return getpass.getuser()
    except (OSError, KeyError) as exc:
        log.warning("Could not determine the login name (%s); using %r", exc, DEFAULT_OPERATOR_ID)
        return DEFAULT_OPERATOR_ID
