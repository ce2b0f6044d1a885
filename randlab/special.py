"""Special functions used to turn test statistics into p-values.

Every p-value in randlab goes through one of these two SciPy primitives.
"""

from scipy import special as _special


def erfc(x: float) -> float:
    """Complementary error function."""
    return float(_special.erfc(x))


def gammaincc(a: float, x: float) -> float:
    """Regularized upper incomplete gamma Q(a, x) = Gamma(a, x) / Gamma(a)."""
    return float(_special.gammaincc(a, x))


__all__ = ["erfc", "gammaincc"]
