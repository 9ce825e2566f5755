from __future__ import annotations

import logging
import secrets
from typing import Hashable, Sequence

from ..errors import InsufficientParticipants


logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 3
MAX_SHUFFLE_ATTEMPTS = 1000

STRATEGY_CYCLE = "cycle"
STRATEGY_SHUFFLE = "shuffle"
STRATEGIES = (STRATEGY_CYCLE, STRATEGY_SHUFFLE)


def _system_rng() -> secrets.SystemRandom:
    return secrets.SystemRandom()


def _cycle(ids: list, rng) -> dict:
    order = ids[:]
    rng.shuffle(order)
    return {giver: order[(i + 1) % len(order)] for i, giver in enumerate(order)}


def _rotation(ids: list) -> list:
    return ids[1:] + ids[:1]


def _rejection_sample(ids: list, rng, max_attempts: int) -> dict:
    receivers = None
    for _ in range(max_attempts):
        candidate = ids[:]
        rng.shuffle(candidate)
        if all(a != b for a, b in zip(ids, candidate)):
            receivers = candidate
            break

    if receivers is None:
        logger.warning("No derangement found in %d shuffles, using rotation", max_attempts)
        receivers = _rotation(ids)

    return dict(zip(ids, receivers))


def draw(
    participant_ids: Sequence[Hashable],
    strategy: str = STRATEGY_CYCLE,
    rng=None,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> dict:
    """
    Returns giver_id -> receiver_id with nobody mapped to themselves.

    "cycle" shuffles the ids and gives each one to the next, wrapping around, so
    the result is always one cycle through everybody. "shuffle" retries random
    permutations until none keeps an id in place (rotating by one if none is found
    within max_attempts), so several smaller cycles are possible.

    rng defaults to the OS CSPRNG; anything with a random.Random-style shuffle works.
    """
    ids = list(participant_ids)
    if len(ids) < MIN_PARTICIPANTS:
        raise InsufficientParticipants(f"Need at least {MIN_PARTICIPANTS} participants for a draw.")
    if len(set(ids)) != len(ids):
        raise ValueError("participant ids must be unique")
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown draw strategy: {strategy!r}")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    rng = rng or _system_rng()

    if strategy == STRATEGY_CYCLE:
        return _cycle(ids, rng)
    return _rejection_sample(ids, rng, max_attempts)


def is_derangement(mapping: dict) -> bool:
    """True when mapping is a bijection of its keys onto themselves with no fixed point."""
    keys = set(mapping)
    return (
        set(mapping.values()) == keys
        and all(giver != receiver for giver, receiver in mapping.items())
    )


def cycles(mapping: dict) -> list[list]:
    """Splits a permutation into its cycles, each starting at its first unseen key."""
    seen = set()
    result = []
    for start in mapping:
        if start in seen:
            continue
        cycle = []
        node = start
        while node not in seen:
            seen.add(node)
            cycle.append(node)
            node = mapping[node]
        result.append(cycle)
    return result
