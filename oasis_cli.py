#!/usr/bin/env python3
"""Pieces shared by the prime_oasis, prime_oases and oasis_layer commands."""

from __future__ import annotations

import argparse
from typing import Mapping, Optional

from oasis_interrupt import InterruptController
from oasis_search import ConfigError, OasisSearch, SearchResult, __version__
from oasis_trace import TraceConfig, configure_logging


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser(prog: str, usage: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description=usage,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("params", nargs="*", help="positional parameters, see above")
    parser.add_argument("--max-hits", type=positive_int, default=None,
                        help="Stop after this many oasis primes")
    parser.add_argument("--progress", action="store_true",
                        help="Show a progress bar over the desert positions")
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
    return parser


def start_trace(environ: Optional[Mapping[str, str]] = None) -> TraceConfig:
    """Read ``XPT_FLG``, hook up the trace channels, print the version line."""
    trace = TraceConfig.from_env(environ)
    configure_logging(trace)
    if trace.enabled:
        print(f"version: v{__version__}")
    return trace


def banner(title: str) -> None:
    line = f"{title} - Press 'q', ESC, or Ctrl+C to interrupt"
    print(line)
    print("=" * len(line))
    print()


def report_error(e: ConfigError, usage: str) -> int:
    print(f"ERROR: {e.message}")
    print(usage)
    return e.code


def run_search(mode, trace: Optional[TraceConfig] = None,
               max_hits: Optional[int] = None, progress: bool = False) -> SearchResult:
    with InterruptController() as interrupt:
        search = OasisSearch(mode, interrupt=interrupt, max_hits=max_hits,
                             progress=progress, trace=trace)
        return search.run()
