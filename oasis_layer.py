#!/usr/bin/env python3
"""oasis_layer: the fixed-size layer experiments around lcm(1..701) ~ 2**1024.

Each layer searches from lcm(1..701) to twice that, stepping by a smaller
desert; deeper layers use smaller steps and so visit more positions.

    oasis_layer 1      # step lcm(1..691)
    oasis_layer 2      # step lcm(1..683)
    oasis_layer 3      # step lcm(1..677), stops after 32000 oasis primes
"""

from __future__ import annotations

import sys
from typing import List, Optional

from oasis_cli import banner, build_parser, report_error, run_search, start_trace
from oasis_search import ConfigError, range_mode

START_N = 701

# layer -> (step n, hit cap)
LAYERS = {
    1: (691, None),
    2: (683, None),
    3: (677, 32000),
}

# layer 1 output starts straight with the hits
QUIET_LAYERS = {1}

USAGE = """\
---< USAGE:
       oasis_layer <layer>

---< DESCRIPTION:
       <layer>  1, 2 or 3. Searches lcm(1..701) to 2*lcm(1..701) with step
                lcm(1..691), lcm(1..683) or lcm(1..677) respectively.
---"""


def layer_params(params: List[str]):
    """Return ``(mode, hit cap)`` for the requested layer."""
    if len(params) != 1:
        raise ConfigError(-1, f"expected 1 parameter, got {len(params)}")
    text = params[0]
    if not (text.isascii() and text.isdigit()) or int(text) not in LAYERS:
        raise ConfigError(-2, f"<layer> must be one of {sorted(LAYERS)}, got {text!r}")
    step_n, cap = LAYERS[int(text)]
    return range_mode(START_N, step_n), cap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser("oasis_layer", USAGE).parse_args(argv)
    trace = start_trace()
    try:
        mode, cap = layer_params(args.params)
    except ConfigError as e:
        return report_error(e, USAGE)

    layer = int(args.params[0])
    if layer not in QUIET_LAYERS:
        banner(f"Prime Oasis Layer {layer}")
    max_hits = args.max_hits if args.max_hits is not None else cap
    run_search(mode, trace, max_hits, args.progress)
    return 0


if __name__ == "__main__":
    sys.exit(main())
