#!/usr/bin/env python3
"""Search for oasis primes at the edges of prime deserts.

For a desert position ``pit`` (a multiple of some ``lcm(1..n)``) the only
prime candidates nearby are ``pit - 1`` and ``pit + 1``.  The search walks a
sequence of positions, tests both neighbours of each one and prints every
probable prime the moment the test returns.

Two ways to lay out the positions:

* :class:`RangeMode` -- ``start, start+step, ...`` while ``pit <= end``.
  The outermost neighbours (``start - 1`` and ``end + 1``) lie outside the
  range and are skipped, and twins (both sides prime) are counted.
* :class:`IndexedMode` -- ``desert*offset, desert*(offset+1), ...`` for
  ``count`` positions, reported with a hit percentage.

When consecutive positions are 2 apart, ``pit - 1`` equals the previous
``pit + 1``; that number is tested and printed only once.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, NamedTuple, Optional

from tqdm import tqdm

from oasis_lcm import PRIME_ROUNDS, big, build_lcm, is_probable_prime
from oasis_trace import XPT_SNP, TraceConfig

__version__ = "1.6.1"

# poll the interrupt source once per this many positions
CHECK_EVERY = 100

log = logging.getLogger("oasis.search")


class ConfigError(Exception):
    """Bad search parameters; ``code`` becomes the process exit status."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class OasisHit(NamedTuple):
    value: int
    sign: int      # -1 or +1
    pit: int
    index: int     # multiplier of the desert (indexed mode) or step count
    twin: bool


class SearchStats:
    """Running counters for one search."""

    def __init__(self):
        self.tries = 0
        self.hits = 0
        self.twins = 0

    @property
    def hit_rate(self) -> float:
        """Hits per try, in percent."""
        if self.tries == 0:
            return 0.0
        return self.hits / self.tries * 100.0

    def __repr__(self) -> str:
        return f"SearchStats(tries={self.tries}, hits={self.hits}, twins={self.twins})"


class SearchResult(NamedTuple):
    stats: SearchStats
    interrupted: bool
    last_pit: Optional[int]


# ─────────────────────────────────────────────────────────────────────────────
# 1) Candidate positions
# ─────────────────────────────────────────────────────────────────────────────
class RangeMode:
    """Positions ``start, start+step, ...`` up to and including ``end``."""

    track_twins = True

    def __init__(self, start, end, step):
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if end < start:
            raise ValueError("end must not be below start")
        self.start = big(start)
        self.end = big(end)
        self.step = big(step)

    @property
    def first(self):
        return self.start

    @property
    def last(self):
        return self.end

    def positions(self) -> Iterator:
        pit = self.start
        while pit <= self.end:
            yield pit
            pit = pit + self.step

    def total(self) -> int:
        return int((self.end - self.start) // self.step) + 1

    def index(self, i: int) -> int:
        return i

    def hit_line(self, hit: OasisHit) -> str:
        if hit.twin:
            return f"oasis primes = {hit.value}"
        return f"oasis prime  = {hit.value}"

    def summary(self, stats: SearchStats) -> str:
        return f"(try={stats.tries}, hit={stats.hits}, twin={stats.twins})"

    def __repr__(self) -> str:
        return (f"RangeMode(start={self.start.bit_length()} bits, "
                f"end={self.end.bit_length()} bits, step={self.step.bit_length()} bits)")


class IndexedMode:
    """Positions ``desert*offset, desert*(offset+1), ...``, ``count`` of them.

    ``n`` is only used for labels: ``desert`` is expected to be lcm(1..n).
    """

    track_twins = False
    first = None
    last = None

    def __init__(self, desert, offset: int = 1, count: int = 1, n: Optional[int] = None):
        if desert <= 0:
            raise ValueError(f"desert must be positive, got {desert}")
        if offset < 1 or count < 1:
            raise ValueError("offset and count must be >= 1")
        self.desert = big(desert)
        self.offset = offset
        self.count = count
        self.n = n

    def positions(self) -> Iterator:
        pit = self.desert * self.offset
        for _ in range(self.count):
            yield pit
            pit = pit + self.desert

    def total(self) -> int:
        return self.count

    def index(self, i: int) -> int:
        return self.offset + i

    def _name(self) -> str:
        return f"d{self.n}" if self.n is not None else f"d={self.desert}"

    def hit_line(self, hit: OasisHit) -> str:
        sign = "-" if hit.sign < 0 else "+"
        return f"{self._name()}*{hit.index}{sign}1 = {hit.value}"

    def summary(self, stats: SearchStats) -> str:
        return (f"{{ prime_oases {self._name()} x{self.offset} {self.count}: "
                f"try={stats.tries}, hit={stats.hits}({stats.hit_rate:2.1f}%) }}")

    def __repr__(self) -> str:
        return (f"IndexedMode(desert={self.desert.bit_length()} bits, "
                f"offset={self.offset}, count={self.count})")


def range_mode(start_n: int, step_n: int, end_n: Optional[int] = None) -> RangeMode:
    """Build a :class:`RangeMode` from the ``n`` of each lcm(1..n).

    Without ``end_n`` the range runs from start to twice start.
    """
    start = build_lcm(start_n)
    step = build_lcm(step_n)
    if end_n is None:
        end = start + start
        if start < 2 or step < 2:
            raise ConfigError(-2, f"start and step must be at least 2 (start={start}, step={step})")
    else:
        end = build_lcm(end_n)
        if start < 2 or end < 3 or step < 2:
            raise ConfigError(-3, f"need start >= 2, end >= 3, step >= 2 "
                                  f"(start={start}, end={end}, step={step})")
        if end < start:
            raise ConfigError(-3, f"end lcm(1..{end_n}) is below start lcm(1..{start_n})")
    return RangeMode(start, end, step)


def indexed_mode(n: int, offset: int = 1, count: int = 1) -> IndexedMode:
    """Build an :class:`IndexedMode` over the desert lcm(1..n)."""
    desert = build_lcm(n)
    if desert < 2:
        raise ConfigError(-4, f"desert lcm(1..{n}) = {desert} must be at least 2")
    if offset < 1 or count < 1:
        raise ConfigError(-2, f"offset and count must be at least 1 (offset={offset}, count={count})")
    return IndexedMode(desert, offset, count, n=n)


# ─────────────────────────────────────────────────────────────────────────────
# 2) Oasis evaluation
# ─────────────────────────────────────────────────────────────────────────────
class OasisEvaluator:
    """Test ``pit - 1`` and ``pit + 1`` for one position at a time.

    Keeps the previous position's ``pit + 1`` so a number shared by two
    adjacent positions is tested once.  Counts go into ``stats``.
    """

    def __init__(self, mode, stats: SearchStats,
                 is_prime: Callable[..., bool] = is_probable_prime,
                 rounds: int = PRIME_ROUNDS):
        self.mode = mode
        self.stats = stats
        self.is_prime = is_prime
        self.rounds = rounds
        self.previous_plus = big(0)

    def reset(self) -> None:
        self.previous_plus = big(0)

    def evaluate(self, pit, index: int = 0) -> Iterator[OasisHit]:
        """Yield the hits at ``pit``, minus side first, as each is confirmed."""
        if pit <= 0:
            raise ValueError(f"desert position must be positive, got {pit}")
        stats = self.stats
        twin_flag = False

        first, last = self.mode.first, self.mode.last

        if first is None or pit != first:
            m1 = pit - 1
            if m1 != self.previous_plus:
                stats.tries += 1
                if self.is_prime(m1, self.rounds):
                    stats.hits += 1
                    twin_flag = self.mode.track_twins
                    yield OasisHit(m1, -1, pit, index, False)
            else:
                log.debug("%s already tested as previous pit+1", m1)

        if last is None or pit != last:
            p1 = pit + 1
            self.previous_plus = p1
            stats.tries += 1
            if self.is_prime(p1, self.rounds):
                stats.hits += 1
                if twin_flag:
                    stats.twins += 1
                yield OasisHit(p1, 1, pit, index, twin_flag)


# ─────────────────────────────────────────────────────────────────────────────
# 3) Search loop
# ─────────────────────────────────────────────────────────────────────────────
def _emit(line: str) -> None:
    print(line, flush=True)


class OasisSearch:
    """Run one search over ``mode`` and print hits and the summary line.

    ``interrupt`` is anything with a ``should_interrupt()`` method; it is
    asked before every ``check_every``-th position.  ``max_hits`` stops the
    search once that many hits have been printed.  Every line goes to
    ``out``; with ``progress`` the bar is cleared around each write.
    With the snapshot channel on in ``trace``, the counters are logged at
    each poll.
    """

    def __init__(self, mode, interrupt=None, out: Optional[Callable[[str], None]] = None,
                 max_hits: Optional[int] = None, progress: bool = False,
                 check_every: int = CHECK_EVERY,
                 is_prime: Callable[..., bool] = is_probable_prime,
                 trace: Optional[TraceConfig] = None):
        if max_hits is not None and max_hits < 1:
            raise ValueError(f"max_hits must be at least 1, got {max_hits}")
        self.mode = mode
        self.interrupt = interrupt
        self.out = out or _emit
        self.max_hits = max_hits
        self.progress = progress
        self.check_every = check_every
        self.is_prime = is_prime
        self.trace = trace or TraceConfig()

    def _poll(self, i: int, stats: SearchStats) -> bool:
        if (i + 1) % self.check_every != 0:
            return False
        if self.trace.wants(XPT_SNP):
            log.info("position %d: %r", i + 1, stats)
        if self.interrupt is None:
            return False
        return self.interrupt.should_interrupt()

    def run(self) -> SearchResult:
        mode = self.mode
        stats = SearchStats()
        evaluator = OasisEvaluator(mode, stats, is_prime=self.is_prime)
        bar = None
        if self.progress:
            bar = tqdm(total=mode.total(), unit="pit", desc="Searching deserts", leave=False)

        def emit(line: str) -> None:
            if bar is None:
                self.out(line)
                return
            with tqdm.external_write_mode():
                self.out(line)

        log.info("start %r", mode)
        interrupted = False
        pit = None
        try:
            for i, pit in enumerate(mode.positions()):
                if self._poll(i, stats):
                    emit("\n\n*** Interrupted by user ***")
                    emit(f"Current position: pit = {pit}")
                    interrupted = True
                    break

                capped = False
                for hit in evaluator.evaluate(pit, mode.index(i)):
                    emit(mode.hit_line(hit))
                    if self.max_hits is not None and stats.hits >= self.max_hits:
                        capped = True
                        break
                if capped:
                    log.warning("hit cap %d reached", self.max_hits)
                    break

                if bar is not None:
                    bar.update(1)
        finally:
            if bar is not None:
                bar.close()

        self.out(mode.summary(stats))
        log.info("done %r interrupted=%s", stats, interrupted)
        return SearchResult(stats, interrupted, pit)
