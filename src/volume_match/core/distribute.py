"""Largest-remainder distribution of an integer volume across weights."""

from typing import List, Sequence


def distribute_volume(total: int, weights: Sequence[int], cap: bool) -> List[int]:
    """Split ``total`` across ``weights`` proportionally, in whole units.

    Each receiver first gets ``floor(total * weight / sum(weights))``. The
    units lost to flooring are then handed out one at a time in input order,
    wrapping around the receivers. Receivers listed first collect the
    leftover units, so callers should pass weights sorted descending.

    Args:
        total: Volume to distribute
        weights: Non-negative weight per receiver
        cap: When True, no receiver gets more than its own weight. The
            clipped units are simply not distributed.

    Returns:
        One integer per weight. Sums to ``total`` when ``cap`` is False and
        the weights are not all zero; never exceeds ``total`` otherwise.

    Raises:
        ValueError: If the total or any weight is negative

    Examples:
        >>> distribute_volume(20, [10, 10, 10], cap=True)
        [7, 7, 6]
        >>> distribute_volume(10, [8, 4], cap=True)
        [7, 3]
        >>> distribute_volume(5, [0, 0], cap=False)
        [0, 0]
    """
    if total < 0:
        raise ValueError(f"Cannot distribute negative volume: {total}")
    if any(w < 0 for w in weights):
        raise ValueError(f"Weights must be non-negative: {list(weights)}")

    weights_sum = sum(weights)
    if weights_sum == 0:
        return [0] * len(weights)

    distributed = [(total * w) // weights_sum for w in weights]

    # Flooring loses less than one unit per receiver
    remainder = total - sum(distributed)
    i = 0
    while remainder > 0:
        distributed[i] += 1
        remainder -= 1
        i = (i + 1) % len(distributed)

    if cap:
        return [min(v, w) for v, w in zip(distributed, weights)]
    return distributed
