#!/usr/bin/env python3
"""prime_oasis: oasis primes between two deserts, walking by a smaller desert.

    prime_oasis 701 691            # lcm(1..701) .. 2*lcm(1..701), step lcm(1..691)
    prime_oasis 701 709 691        # explicit end lcm(1..709)

Press 'q', ESC or Ctrl+C to stop early; the statistics line is still printed.
"""

from __future__ import annotations

import sys
from typing import List, Optional

from oasis_cli import banner, build_parser, report_error, run_search, start_trace
from oasis_search import ConfigError, RangeMode, range_mode

USAGE = """\
---< USAGE:
       prime_oasis <start> [<end>] <step>

---< DESCRIPTION:
       <start>  Start position: n for LCM(1,2,3,...,n)
       <end>    End position: n for LCM(1,2,3,...,n) (optional, defaults to start*2)
       <step>   Search step: n for LCM(1,2,3,...,n)
---< CAUTION:
       1) The value specified in the parameter is the value of n in lcm(1,2,3,...n).
       2) If you omit <end>, it will be set to <start>*2 (search from <start> to <start>*2).
       3) Both ends are included; start-1 and end+1 are not tested.
---"""


def parse_n(text: str, what: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ConfigError(-4, f"{what} must be a non-negative integer, got {text!r}")
    return int(text)


def parse_range(params: List[str]) -> RangeMode:
    """Turn ``<start> [<end>] <step>`` into a :class:`RangeMode`."""
    if len(params) == 2:
        start_n = parse_n(params[0], "<start>")
        step_n = parse_n(params[1], "<step>")
        return range_mode(start_n, step_n)
    if len(params) == 3:
        start_n = parse_n(params[0], "<start>")
        end_n = parse_n(params[1], "<end>")
        step_n = parse_n(params[2], "<step>")
        return range_mode(start_n, step_n, end_n)
    raise ConfigError(-1, f"expected 2 or 3 parameters, got {len(params)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser("prime_oasis", USAGE).parse_args(argv)
    trace = start_trace()
    banner("Prime Oasis")
    try:
        mode = parse_range(args.params)
    except ConfigError as e:
        return report_error(e, USAGE)

    run_search(mode, trace, args.max_hits, args.progress)
    return 0


if __name__ == "__main__":
    sys.exit(main())
