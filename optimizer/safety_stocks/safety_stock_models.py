"""
Safety Stock Models

Standard-normal building blocks for the loss-function safety stock formula.
The CDF is the Abramowitz & Stegun 7.1.26 polynomial approximation rather than
an exact special function, so table values agree with the spreadsheet the
calculators were fitted against.
"""

import numpy as np

# Abramowitz & Stegun 7.1.26 coefficients
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

_SQRT_2 = np.sqrt(2.0)
_SQRT_2PI = np.sqrt(2.0 * np.pi)


def normal_pdf(x):
    """Standard normal density. Accepts scalars or arrays."""
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x * x) / _SQRT_2PI


def normal_cdf(x):
    """
    Standard normal cumulative distribution (polynomial approximation).

    Args:
        x: Scalar or array of z-values

    Returns:
        Phi(x), same shape as the input
    """
    x = np.asarray(x, dtype=float)
    sign = np.where(x >= 0, 1.0, -1.0)
    z = np.abs(x) / _SQRT_2

    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * np.exp(-z * z)

    return 0.5 * (1.0 + sign * y)


def expected_shortfall(x):
    """
    Standard normal loss function E(x) = phi(x) - x * (1 - Phi(x)).

    E(x) is the expected number of standard deviations by which demand
    exceeds x.
    """
    x = np.asarray(x, dtype=float)
    return normal_pdf(x) - x * (1.0 - normal_cdf(x))


def shortfall_difference(k, q_over_sigma):
    """
    max(0, E(k) - E(k + q/sigma)), broadcasting k against q/sigma.

    Args:
        k: Safety factor(s)
        q_over_sigma: Order quantity over lead time standard deviation

    Returns:
        Non-negative array of shortfall differences
    """
    k = np.asarray(k, dtype=float)
    q_over_sigma = np.asarray(q_over_sigma, dtype=float)
    difference = expected_shortfall(k) - expected_shortfall(k + q_over_sigma)
    return np.maximum(0.0, difference)
