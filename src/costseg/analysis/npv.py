"""
Time value of money for a stream of annual tax savings.
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from costseg.domain.errors import InvalidInput


def _discount_factors(n: int, rate: float) -> np.ndarray:
    # year 1 is discounted one full period
    t = np.arange(1, n + 1, dtype=float)
    return (1.0 + rate) ** -t


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    NPV = sum(cf_t / (1 + r)^t) for t = 1..N, r = discount_rate / 100.

    An empty stream is worth 0.
    """
    r = float(discount_rate) / 100.0
    if r < 0 or math.isnan(r):
        raise InvalidInput(f"discount_rate must be >= 0, got {discount_rate}")

    cf = np.asarray(list(cash_flows), dtype=float)
    if cf.size == 0:
        return 0.0

    return round(float(np.sum(cf * _discount_factors(cf.size, r))), 2)


def calculate_irr(
    cash_flows: Sequence[float],
    tolerance: float = 0.0001,
    max_iterations: int = 1000,
) -> float:
    """
    Internal rate of return by bisection over [-50%, 500%].

    Returns the rate as a percentage rounded to 2 decimals, or NaN when the
    stream has no sign change inside the search range (an IRR doesn't exist
    for a stream of pure savings with no up-front cost).
    """
    cf = np.asarray(list(cash_flows), dtype=float)
    if cf.size == 0 or not np.any(cf):
        return float("nan")

    def npv_at(rate: float) -> float:
        return float(np.sum(cf * _discount_factors(cf.size, rate)))

    low, high = -0.5, 5.0
    npv_low = npv_at(low)
    if npv_low * npv_at(high) > 0:
        return float("nan")

    for _ in range(max_iterations):
        mid = (low + high) / 2.0
        npv_mid = npv_at(mid)
        if abs(npv_mid) < tolerance:
            return round(mid * 100.0, 2)
        if npv_mid * npv_low < 0:
            high = mid
        else:
            low, npv_low = mid, npv_mid

    return round((low + high) / 2.0 * 100.0, 2)
