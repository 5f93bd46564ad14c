"""
Special functions used by the transform engine.

Thin wrappers around :mod:`scipy.special` and :mod:`scipy.optimize`, giving the
engine a small, fixed set of collaborators: Bessel functions of the first and
second kind, the positive zeros of :math:`J_\\nu` for real order, and a bounded
one-dimensional minimiser.
"""
import logging
import numpy as np
import scipy.special as sp
from scipy.optimize import minimize_scalar
from typing import Callable, Tuple

logger = logging.getLogger(__name__)

#: Number of bits in the mantissa of a double.
DOUBLE_BITS = np.finfo(float).nmant + 1

_EPS = np.finfo(float).eps
_MAX_BISECTIONS = 200


def bessel_j(order, x):
    r"""Bessel function of the first kind, :math:`J_\nu(x)`."""
    return sp.jv(order, x)


def bessel_y(order, x):
    r"""Bessel function of the second kind (Neumann function), :math:`Y_\nu(x)`."""
    return sp.yv(order, x)


def _bisect_zeros(order, lower, upper):
    """Refine one zero of J_order inside each bracket [lower, upper] by bisection."""
    a = np.array(lower, dtype=float)
    b = np.array(upper, dtype=float)
    fa = sp.jv(order, a)

    for _ in range(_MAX_BISECTIONS):
        mid = 0.5 * (a + b)
        fm = sp.jv(order, mid)
        left = np.sign(fm) == np.sign(fa)
        a = np.where(left, mid, a)
        fa = np.where(left, fm, fa)
        b = np.where(left, b, mid)
        if np.all(b - a <= 4 * _EPS * b):
            break
    else:  # pragma: nocover
        logger.warning(
            f"Bisection for zeros of J_{order} did not converge in "
            f"{_MAX_BISECTIONS} steps."
        )

    return 0.5 * (a + b)


def bessel_j_zeros(order: float, n: int) -> np.ndarray:
    r"""
    The first `n` positive zeros of :math:`J_\nu`.

    Parameters
    ----------
    order : float
        Order :math:`\nu \geq 0` of the Bessel function. Need not be an integer.
    n : int
        Number of zeros to return.

    Returns
    -------
    zeros : array
        Strictly increasing array of length `n`.

    Notes
    -----
    Integer orders are delegated to :func:`scipy.special.jn_zeros`. For a real order
    :math:`n_0 < \nu < n_0 + 1` the k-th zero is bracketed by the k-th zeros of the
    integer orders either side, since :math:`j_{\nu,k}` increases with
    :math:`\nu` and zeros of consecutive orders interlace. Each bracket holds exactly
    one zero, which is then found by bisection.
    """
    order = float(order)
    n = int(n)
    if not np.isfinite(order) or order < 0:
        raise ValueError(f"Zeros of J_nu are only available for finite nu >= 0, got {order}")
    if n < 1:
        raise ValueError(f"Number of zeros must be at least 1, got {n}")

    floor = int(np.floor(order))
    if order == floor:
        zeros = sp.jn_zeros(floor, n)
    else:
        zeros = _bisect_zeros(order, sp.jn_zeros(floor, n), sp.jn_zeros(floor + 1, n))

    if not np.all(np.isfinite(zeros)) or np.any(np.diff(zeros) <= 0) or zeros[0] <= 0:
        raise ArithmeticError(f"Could not compute {n} ordered zeros of J_{order}")

    return zeros


def bessel_j_zero(order: float, k: int) -> float:
    r"""The k-th (1-based) positive zero of :math:`J_\nu`."""
    return float(bessel_j_zeros(order, k)[-1])


def minimize_1d(
    f: Callable[[float], float], lo: float, hi: float, precision_bits: int = DOUBLE_BITS
) -> Tuple[float, float]:
    """
    Minimise a scalar function on a closed interval with Brent's method.

    Parameters
    ----------
    f : callable
        The function to minimise.
    lo, hi : float
        The bracket to search.
    precision_bits : int
        Requested precision in bits. Brent's method cannot locate a minimum better
        than the square root of machine precision, so this is limited to half the
        mantissa.

    Returns
    -------
    argmin, fmin : float
        Location and value of the minimum.
    """
    bits = min(int(precision_bits), DOUBLE_BITS // 2)
    tol = np.ldexp(1.0, 1 - bits) * max(abs(lo), abs(hi))

    res = minimize_scalar(
        f, bounds=(lo, hi), method="bounded", options={"xatol": tol, "maxiter": 1000}
    )
    if not res.success:
        raise RuntimeError(f"Minimization failed on [{lo}, {hi}]: {res.message}")

    return float(res.x), float(res.fun)
