"""Reproducible seed derivation for sampling draws.

``seed_seq_generate`` follows the standard seed-sequence mixing algorithm,
so a list of 32-bit words expands deterministically into any number of
well-mixed 32-bit outputs. ``mix_seed`` folds the coordinates of one
sampling draw into a single 64-bit seed.
"""

from __future__ import annotations

from typing import Iterable

_MASK32 = 0xFFFFFFFF


def _t(x: int) -> int:
    return x ^ (x >> 27)


def seed_seq_generate(seeds: Iterable[int], count: int) -> list[int]:
    """Expand ``seeds`` (taken modulo 2**32) into ``count`` 32-bit words."""
    if count < 0:
        raise ValueError("seed_seq_generate: count must be non-negative")
    v = [int(s) & _MASK32 for s in seeds]
    n = count
    if n == 0:
        return []
    out = [0x8B8B8B8B] * n
    s = len(v)
    if n >= 623:
        t = 11
    elif n >= 68:
        t = 7
    elif n >= 39:
        t = 5
    elif n >= 7:
        t = 3
    else:
        t = (n - 1) // 2
    p = (n - t) // 2
    q = p + t
    m = max(s + 1, n)

    for k in range(m):
        r1 = (1664525 * _t(out[k % n] ^ out[(k + p) % n] ^ out[(k - 1) % n])) & _MASK32
        if k == 0:
            r2 = r1 + s
        elif k <= s:
            r2 = r1 + k % n + v[k - 1]
        else:
            r2 = r1 + k % n
        r2 &= _MASK32
        out[(k + p) % n] = (out[(k + p) % n] + r1) & _MASK32
        out[(k + q) % n] = (out[(k + q) % n] + r2) & _MASK32
        out[k % n] = r2

    for k in range(m, m + n):
        r3 = (
            1566083941
            * _t((out[k % n] + out[(k + p) % n] + out[(k - 1) % n]) & _MASK32)
        ) & _MASK32
        r4 = (r3 - k % n) & _MASK32
        out[(k + p) % n] ^= r3
        out[(k + q) % n] ^= r4
        out[k % n] = r4
    return out


def mix_seed(query_ordinal: int, round_: int, stratum_ordinal: int, target: int) -> int:
    """A 64-bit seed determined by one draw's query, round, stratum and target."""
    words = []
    for value in (query_ordinal, round_, stratum_ordinal, target):
        value = int(value)
        words.append(value & _MASK32)
        words.append((value >> 32) & _MASK32)
    low, high = seed_seq_generate(words, 2)
    return (high << 32) | low