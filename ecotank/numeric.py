"""
Scalar helpers shared by the metric and step computations.
"""


def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Clamp value into [min_val, max_val]"""
    return max(min_val, min(max_val, value))


def approach(current: float, target: float, max_delta: float) -> float:
    """
    Move current toward target by at most max_delta without overshooting.

    Args:
        current: Current value
        target: Value to converge toward
        max_delta: Largest allowed change (non-negative)

    Returns:
        Updated value
    """
    if current < target:
        return min(target, current + max_delta)
    return max(target, current - max_delta)


def asymmetric_approach(current: float, target: float, dt: float,
                        rate_up: float, rate_down: float) -> float:
    """Converge toward target using rate_up when rising and rate_down when falling"""
    rate = rate_up if target > current else rate_down
    return approach(current, target, dt * rate)
