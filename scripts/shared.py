#!/usr/bin/env python3
"""Shared script utilities.

Keep scripts tiny: centralize structured logging.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))
