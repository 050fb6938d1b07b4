"""Fitness-proportionate ("roulette wheel") sampling primitive."""

from __future__ import annotations

import itertools
import math
import random
from typing import Sequence, TypeVar


T = TypeVar("T")


def weighted_random_selection(
    elements: Sequence[T],
    weights: Sequence[float | None],
    rng: random.Random,
) -> T | None:
    """Select one element with probability proportional to its weight.

    Weights do not need to sum to 1. A weight is undefined when it is ``None``
    or NaN. If every weight is undefined the draw falls back to a uniform
    choice, which is what a population normalized by a zero total fitness
    produces.

    Args:
        elements: Candidates to select from.
        weights: Non-negative weights aligned by index with ``elements``.
        rng: Random source. Exactly one ``rng.random()`` draw is consumed.

    Returns:
        The selected element, or ``None`` when no element can be selected
        (weights summing to zero, or undefined weights mixed into otherwise
        valid ones).

    Raises:
        ValueError: If ``elements`` is empty or lengths differ.

    Negative weights are not validated. The caller's ``weights`` sequence is
    never modified. Each element owns the interval ending at its cumulative
    weight, right edge inclusive, so a draw of exactly ``0.0`` selects a
    leading zero-weight element.
    """
    if len(elements) != len(weights):
        raise ValueError(
            f"Elements and weights lengths must match ({len(elements)} != {len(weights)})."
        )
    if not elements:
        raise ValueError("Cannot select from an empty sequence.")

    if all(weight is None or math.isnan(weight) for weight in weights):
        values = [1.0 / len(weights)] * len(weights)
    else:
        values = [math.nan if weight is None else float(weight) for weight in weights]

    # Same left-to-right accumulation as the walk below, so the last
    # cumulative weight equals the total exactly.
    cumulative_weights = list(itertools.accumulate(values))
    total_weight = cumulative_weights[-1]
    random_value = rng.random() * total_weight
    if total_weight == 0:
        return None

    for element, cumulative_weight in zip(elements, cumulative_weights):
        if random_value <= cumulative_weight:
            return element
    return None
