#!/usr/bin/env python3
"""prime_oases: oasis primes next to consecutive multiples of one desert.

    prime_oases d3                 # 6-1, 6+1
    prime_oases d691 701           # 701 deserts starting at lcm(1..691)
    prime_oases d691 x100 701      # ... starting at 100*lcm(1..691)
"""

from __future__ import annotations

import sys
from typing import List, Optional

from oasis_cli import banner, build_parser, report_error, run_search, start_trace
from oasis_search import ConfigError, IndexedMode, indexed_mode

USAGE = """\
---< USAGE:
       prime_oases d<n> [x<offset>] [<num>]

---< DESCRIPTION:
       d<n>       The central coordinates of the desert that can be calculated by LCM(1,2,3,...,n)
       x<offset>  Multiplier of the first desert to search.(optional)
       <num>      Number of deserts to search.(optional)
---< CAUTION:
       1) Since d<n> is a least common multiple, it may be the same value even if n changes.
       2) If you omit x<offset> or <num>, 1 is specified as the default value.
---< EXAMPLES:
       prime_oases d3
       prime_oases d691 701
       prime_oases d691 x100 701
---"""


def _digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def parse_prefixed(text: str, prefix: str, code: int, what: str) -> int:
    """Return the number in ``<prefix><digits>``."""
    if not text.startswith(prefix) or not _digits(text[len(prefix):]):
        raise ConfigError(code, f"{what} must look like {prefix}<digits>, got {text!r}")
    return int(text[len(prefix):])


def parse_count(text: str) -> int:
    if not _digits(text):
        raise ConfigError(-6, f"<num> must be a non-negative integer, got {text!r}")
    return int(text)


def parse_indexed(params: List[str]) -> IndexedMode:
    """Turn ``d<n> [x<offset>] [<num>]`` into an :class:`IndexedMode`."""
    if not 1 <= len(params) <= 3:
        raise ConfigError(-1, f"expected 1 to 3 parameters, got {len(params)}")

    n = parse_prefixed(params[0], "d", -3, "desert")
    offset = 1
    count = 1
    rest = params[1:]
    if rest and rest[0].startswith("x"):
        offset = parse_prefixed(rest[0], "x", -5, "offset")
        rest = rest[1:]
    elif len(rest) == 2:
        # three parameters: the middle one has to be the offset
        offset = parse_prefixed(rest[0], "x", -5, "offset")
    if rest:
        count = parse_count(rest[-1])
    return indexed_mode(n, offset, count)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser("prime_oases", USAGE).parse_args(argv)
    trace = start_trace()
    banner("Prime Oases")
    try:
        mode = parse_indexed(args.params)
    except ConfigError as e:
        return report_error(e, USAGE)

    run_search(mode, trace, args.max_hits, args.progress)
    return 0


if __name__ == "__main__":
    sys.exit(main())
