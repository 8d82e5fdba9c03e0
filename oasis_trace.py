#!/usr/bin/env python3
"""Bit-flag trace channels for the oasis commands.

``XPT_FLG`` holds a hex mask, e.g. ``XPT_FLG=0x0003`` turns on errors and
warnings.  Each channel maps to a ``logging`` level on the ``oasis`` logger;
a filter drops any record whose channel bit is off, so the mask rather than
the level decides what reaches stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional

XPT_ERR = 0x0001
XPT_WRN = 0x0002
XPT_SNP = 0x0004
XPT_TST = 0x0008

# logging level -> (channel bit, tag)
CHANNELS = {
    logging.ERROR: (XPT_ERR, "ERR"),
    logging.WARNING: (XPT_WRN, "WRN"),
    logging.INFO: (XPT_SNP, "SNP"),
    logging.DEBUG: (XPT_TST, "TST"),
}

LOGGER_NAME = "oasis"


def parse_flags(text: Optional[str]) -> int:
    """Parse a hex mask the way ``strtol(text, NULL, 16)`` would."""
    if not text:
        return 0
    text = text.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    digits = ""
    for ch in text:
        if ch not in "0123456789abcdef":
            break
        digits += ch
    return int(digits, 16) if digits else 0


class TraceConfig:
    """Trace mask for one run."""

    def __init__(self, flags: int = 0):
        self.flags = flags

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TraceConfig":
        env = os.environ if environ is None else environ
        return cls(parse_flags(env.get("XPT_FLG")))

    @property
    def enabled(self) -> bool:
        return self.flags != 0

    def wants(self, bit: int) -> bool:
        return bool(self.flags & bit)

    def __repr__(self) -> str:
        return f"TraceConfig(flags=0x{self.flags:04x})"


class ChannelFilter(logging.Filter):
    """Pass records whose channel bit is set; tag them for the formatter."""

    def __init__(self, config: TraceConfig):
        super().__init__()
        self.config = config

    def filter(self, record: logging.LogRecord) -> bool:
        bit, tag = CHANNELS.get(record.levelno, (XPT_ERR, "ERR"))
        record.xpt = tag
        return self.config.wants(bit)


def configure_logging(config: TraceConfig, stream=None) -> logging.Logger:
    """Attach a single stderr handler for ``config`` to the ``oasis`` logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.addFilter(ChannelFilter(config))
    handler.setFormatter(logging.Formatter("%(xpt)s:%(funcName)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger
