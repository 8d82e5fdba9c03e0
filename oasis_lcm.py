#!/usr/bin/env python3
"""Desert moduli and the probable-prime predicate used by the oasis search.

A desert is a multiple of ``L = lcm(1, 2, ..., n)``.  Every integer from 2 to
``n`` divides ``L``, so in the window around ``L*k`` only ``L*k - 1`` and
``L*k + 1`` can be prime.  This module builds ``L`` and wraps the big-integer
primality test; everything else lives in :mod:`oasis_search`.

``gmpy2`` is used when it is installed.  Without it the same operations run
on plain ints through ``sympy``.
"""

from __future__ import annotations

import sys

from sympy import ilcm, isprime

try:
    import gmpy2  # type: ignore
    HAVE_GMPY2 = True
except Exception:
    HAVE_GMPY2 = False


# ─────────────────────────────────────────────────────────────────────────────
# Lift Python's big‐int→str limit (3.11+)
# ─────────────────────────────────────────────────────────────────────────────
if hasattr(sys, "set_int_max_str_digits"):
    sys.set_int_max_str_digits(100000000)

# Miller-Rabin rounds handed to GMP; false positive rate <= 4**-25
PRIME_ROUNDS = 25


# ─────────────────────────────────────────────────────────────────────────────
# 1) Big integers
# ─────────────────────────────────────────────────────────────────────────────
def big(n: int):
    """Return ``n`` as the arbitrary-precision type in use (``mpz`` or int)."""
    if HAVE_GMPY2:
        return gmpy2.mpz(n)
    return int(n)


# ─────────────────────────────────────────────────────────────────────────────
# 2) L = lcm(1, 2, ..., n)
# ─────────────────────────────────────────────────────────────────────────────
def build_lcm(n: int):
    """Return lcm(1, 2, ..., n); 1 for ``n`` of 0 or 1."""
    if n < 0:
        raise ValueError(f"lcm(1..n) needs n >= 0, got {n}")
    acc = big(1)
    for i in range(2, n + 1):
        if HAVE_GMPY2:
            acc = gmpy2.lcm(acc, i)
        else:
            acc = ilcm(acc, i)
    return acc


# ─────────────────────────────────────────────────────────────────────────────
# 3) Probable primes
# ─────────────────────────────────────────────────────────────────────────────
def is_probable_prime(n, rounds: int = PRIME_ROUNDS) -> bool:
    """Probabilistic primality test (``mpz_probab_prime_p`` under gmpy2)."""
    if HAVE_GMPY2:
        return bool(gmpy2.is_prime(n, rounds))
    # sympy's BPSW has no round count
    return bool(isprime(int(n)))
