# src/foosrank/rating/gaussian.py

"""
Normal-CDF win forecast.

erf() is Abramowitz & Stegun formula 7.1.26, max absolute error ~1.5e-7.
Stored match probabilities have always been computed with it.
"""

import math

SQRT_2 = math.sqrt(2.0)

# Abramowitz & Stegun 7.1.26
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def erf(x: float) -> float:
    """Rational approximation of the error function, odd by construction."""
    if x < 0:
        return -erf(-x)
    # The polynomial does not vanish exactly at the origin.
    if x == 0:
        return 0.0
    t = 1.0 / (1.0 + _P * x)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return 1.0 - poly * math.exp(-x * x)


def normal_win_probability(difference: float, spread: float) -> float:
    """
    P(X > 0) for X ~ N(difference, spread^2), via the approximate erf.

    A zero spread saturates to 1.0 / 0.0, or 0.5 when the difference is
    also zero.
    """
    if spread == 0:
        if difference > 0:
            return 1.0
        if difference < 0:
            return 0.0
        return 0.5
    z = difference / spread
    return 0.5 * (1.0 + erf(z / SQRT_2))
