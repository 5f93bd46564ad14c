r"""
Hankel-type transforms using Ogata's quadrature on the zeros of Bessel functions.

The main class, :class:`FBT`, computes

.. math:: F(q) = \int_0^\infty g(x) J_\nu(qx)\, dx

for a user-supplied function :math:`g`, with a fixed number of evaluations of
:math:`g`. Two rules are provided: Ogata's untransformed quadrature and its
double-exponential (DE) variant. In both cases the step size of the quadrature is
tuned to the scale at which :math:`|x g(x)|` peaks.

Note that the Hankel measure is *not* added: to compute
:math:`\int_0^\infty x h(x) J_\nu(qx) dx`, pass ``g = lambda x: x * h(x)``.

References
----------
.. [1] Ogata, H., "A Numerical Integration Formula Based on the Bessel Functions",
       Publ. Res. Inst. Math. Sci. 41, 949 (2005).
.. [2] Kang, Z., Prokudin, A., Sato, N., Terry, J., "Efficient Fourier Transforms
       for Transverse Momentum Dependent Distributions", arXiv:1906.05949 (2019).
"""
import logging
import numpy as np
import warnings
from typing import Callable

from . import special
from .config import MAX_STEP, MAX_ZEROS, N_DEFAULT, NU_DEFAULT, Q_DEFAULT
from .config import TransformConfig

logger = logging.getLogger(__name__)

_BANNER = """\
Fast Bessel Transform (FBT) for TMDs
Zhongbo Kang, Alexei Prokudin, Nobuo Sato, John Terry
Please cite Kang:2019ctl (arXiv:1906.05949)
N is number of function calls
nu is Bessel function order"""


class FBTError(Exception):
    """Base class for errors raised by the transform engine."""

    pass


class ZeroTableError(FBTError):
    """The zeros of the Bessel function could not be tabulated."""

    pass


class EvaluationError(FBTError):
    """A transform, or one of its steps, did not produce a valid result."""

    pass


class DegradedAccuracyWarning(UserWarning):
    """A result was computed, but may be less accurate than requested."""

    pass


def _degraded(msg):
    logger.warning(msg)
    warnings.warn(msg, DegradedAccuracyWarning)


def psi(t):
    r"""The double-exponential map :math:`\psi(t) = t \tanh(\frac{\pi}{2}\sinh t)`."""
    with np.errstate(over="ignore"):
        return t * np.tanh(np.pi / 2 * np.sinh(t))


def d_psi(t):
    r"""
    Derivative of :func:`psi`.

    Overflows to NaN for large `t`; callers decide how to treat that.
    """
    with np.errstate(over="ignore", invalid="ignore"):
        th = np.tanh(np.pi * np.sinh(t) / 2)
        return np.pi * t * (1 - th ** 2) * np.cosh(t) / 2 + th


class FBT:
    r"""
    Fast Bessel Transform engine.

    The zeros of :math:`J_\nu` are tabulated once on construction; all subsequent
    calls are read-only, so an instance may be re-used for any number of functions
    and scales.

    Parameters
    ----------
    nu : float, optional
        Order of the Bessel function, :math:`\nu \geq 0`.
    N : int, optional
        Number of nodes, i.e. calls to the transformed function, :math:`N \geq 1`.
    Q : float, optional
        Characteristic scale of the problem, :math:`Q > 0`. The untransformed step
        size is tuned by searching for the peak of :math:`|x g(x/q)|` in
        ``[Q/10, 10Q]``.

    Invalid parameters are replaced by their defaults (see :mod:`fbt.config`), with
    a :class:`~fbt.config.FallbackWarning`.

    Raises
    ------
    ZeroTableError
        If the zeros of :math:`J_\nu` cannot be computed for the given order.

    Examples
    --------
    >>> import numpy as np
    >>> from fbt import FBT
    >>> engine = FBT(nu=0, N=100)
    >>> F = engine.transform_de(lambda x: x * np.exp(-x ** 2 / 2), 1.0)
    >>> np.isclose(F, np.exp(-0.5))
    True
    """

    def __init__(self, nu=NU_DEFAULT, N=N_DEFAULT, Q=Q_DEFAULT):
        self._config = TransformConfig.validated(nu, N, Q)

        # Extended beyond MAX_ZEROS only if more nodes than that are requested.
        n_zeros = max(MAX_ZEROS, self.N)
        try:
            zeros = special.bessel_j_zeros(self.nu, n_zeros)
        except (ArithmeticError, ValueError, RuntimeError) as e:
            logger.error(f"Could not tabulate zeros of J_{self.nu}: {e}")
            raise ZeroTableError(
                f"Could not tabulate {n_zeros} zeros of J_nu for nu = {self.nu}"
            ) from e

        zeros.flags.writeable = False
        self._zeros = zeros

        logger.info(self.acknowledgement())

    def __repr__(self):
        return f"{self.__class__.__name__}(nu={self.nu}, N={self.N}, Q={self.Q})"

    @staticmethod
    def acknowledgement() -> str:
        """Text of the banner shown on start-up."""
        return _BANNER

    @property
    def config(self) -> TransformConfig:
        """The validated (nu, N, Q) of this engine."""
        return self._config

    @property
    def nu(self) -> float:
        """Order of the Bessel function."""
        return self._config.nu

    @property
    def N(self) -> int:
        """Number of quadrature nodes."""
        return self._config.N

    @property
    def Q(self) -> float:
        """Characteristic scale of the problem."""
        return self._config.Q

    @property
    def zeros(self) -> np.ndarray:
        r"""Read-only table of the positive zeros of :math:`J_\nu`."""
        return self._zeros

    # ===========================================================================
    # Quadrature
    # ===========================================================================
    def _nodes(self):
        """Reduced zeros and weights of the first N nodes."""
        xi = self._zeros[: self.N] / np.pi
        jp1 = special.bessel_j(self.nu + 1, np.pi * xi)
        w = special.bessel_y(self.nu, np.pi * xi) / jp1
        return xi, w

    @staticmethod
    def _sample(g, knots, q):
        return np.vectorize(g, otypes=[float])(knots / q) / q

    @staticmethod
    def _check_q(q):
        if not np.isfinite(q) or q <= 0:
            raise ValueError(f"q must be finite and positive, got {q}")

    @staticmethod
    def _checked(val, what):
        if not np.isfinite(val):
            logger.error(f"{what} is not finite ({val}).")
            raise EvaluationError(f"{what} is not finite ({val}).")
        return float(val)

    def quadrature_sum_plain(self, g: Callable[[float], float], q: float, step: float) -> float:
        r"""
        Untransformed Ogata quadrature sum.

        .. math:: F(q) \approx h \sum_{i=0}^{N-1} w_i \frac{g(h\xi_i/q)}{q} J_\nu(h\xi_i)

        with :math:`\xi_i = j_{\nu,i+1}/\pi` and
        :math:`w_i = Y_\nu(\pi\xi_i)/J_{\nu+1}(\pi\xi_i)`.

        Parameters
        ----------
        g : callable
            Function to transform, called with scalar floats.
        q : float
            The scale at which to evaluate the transform.
        step : float
            The step size :math:`h`.

        Raises
        ------
        EvaluationError
            If the sum cannot be evaluated or is not finite.
        """
        self._check_q(q)
        try:
            xi, w = self._nodes()
            knots = xi * step
            F = self._sample(g, knots, q) * special.bessel_j(self.nu, knots)
            val = np.sum(step * w * F)
        except (ArithmeticError, ValueError, RuntimeError) as e:
            logger.error(f"Untransformed quadrature failed for q = {q}, h = {step}: {e}")
            raise EvaluationError(f"Untransformed quadrature failed: {e}") from e

        return self._checked(val, "Untransformed quadrature sum")

    def quadrature_sum_de(self, g: Callable[[float], float], q: float, step: float) -> float:
        r"""
        Double-exponentially transformed Ogata quadrature sum.

        .. math:: F(q) \approx \pi \sum_{i=0}^{N-1} w_i \frac{g(x_i/q)}{q}
                  J_\nu(x_i) \psi'(h\xi_i), \qquad x_i = \frac{\pi}{h}\psi(h\xi_i)

        Where :math:`\psi'` overflows (very large :math:`h\xi_i`) it is taken to be
        exactly 1, its limiting value, and a
        :class:`DegradedAccuracyWarning` is emitted.

        Parameters
        ----------
        g : callable
            Function to transform, called with scalar floats.
        q : float
            The scale at which to evaluate the transform.
        step : float
            The step size :math:`h` of the DE mesh.

        Raises
        ------
        EvaluationError
            If the sum cannot be evaluated or is not finite.
        """
        self._check_q(q)
        try:
            xi, w = self._nodes()
            knots = np.pi / step * psi(step * xi)
            jnu = special.bessel_j(self.nu, knots)

            psip = d_psi(step * xi)
            bad = np.isnan(psip)
            if np.any(bad):
                _degraded(
                    f"psi' overflowed at {bad.sum()} of {self.N} nodes (h = {step}); "
                    "using 1 there."
                )
                psip[bad] = 1.0

            F = self._sample(g, knots, q)
            val = np.sum(np.pi * w * F * jnu * psip)
        except (ArithmeticError, ValueError, RuntimeError) as e:
            logger.error(f"DE quadrature failed for q = {q}, h = {step}: {e}")
            raise EvaluationError(f"DE quadrature failed: {e}") from e

        return self._checked(val, "DE quadrature sum")

    # ===========================================================================
    # Step sizes
    # ===========================================================================
    def tune_step_plain(self, g: Callable[[float], float], q: float) -> float:
        """
        Untransformed step size which puts the first node at the peak of |x g(x/q)|.

        The peak is searched for in ``[Q/10, 10Q]``. Where `g` underflows to zero
        over most of the bracket (e.g. a narrow function with q much below Q), the
        search can stall on that plateau and return the far end of the bracket.
        The step is capped at :data:`~fbt.config.MAX_STEP`, in which case a
        :class:`DegradedAccuracyWarning` is emitted, as N is likely too small.

        Raises
        ------
        EvaluationError
            If the search fails or `g` is not finite over the bracket.
        """
        self._check_q(q)

        def neg_contribution(x):
            return -abs(x * g(x / q))

        try:
            xmin, fmin = special.minimize_1d(
                neg_contribution, self.Q / 10.0, 10.0 * self.Q, special.DOUBLE_BITS
            )
        except (ArithmeticError, ValueError, RuntimeError) as e:
            logger.error(f"Step size search failed for q = {q}: {e}")
            raise EvaluationError(f"Step size search failed: {e}") from e

        self._checked(fmin, "Peak of |x g(x/q)|")

        hu = xmin / self._zeros[0]
        if hu >= MAX_STEP:
            hu = MAX_STEP
            _degraded(
                f"Number of nodes N = {self.N} may be too small; "
                f"step size capped at {MAX_STEP}."
            )
        return float(hu)

    def tune_step_de(self, hu: float) -> float:
        r"""
        Step size of the DE mesh matching an untransformed step `hu`.

        Given in closed form by

        .. math:: h_t = \frac{1}{\pi j_{\nu,N}}
                  \sinh^{-1}\left(\frac{2}{\pi}\tanh^{-1}\frac{h_u}{\pi}\right)

        with :math:`j_{\nu,N}` the N-th zero of :math:`J_\nu`.

        Parameters
        ----------
        hu : float
            Untransformed step size, ``0 < hu < pi``.
        """
        if not 0 < hu < np.pi:
            raise ValueError(f"Untransformed step must lie in (0, pi), got {hu}")

        zero_n = self._zeros[self.N - 1]
        return float(1 / np.pi / zero_n * np.arcsinh(2 / np.pi * np.arctanh(hu / np.pi)))

    # ===========================================================================
    # Transforms
    # ===========================================================================
    def transform_plain(self, g: Callable[[float], float], q: float) -> float:
        """Untransformed Ogata quadrature with an optimised step size."""
        return self.quadrature_sum_plain(g, q, self.tune_step_plain(g, q))

    def transform_de(self, g: Callable[[float], float], q: float) -> float:
        """Double-exponential Ogata quadrature with an optimised step size."""
        return self.quadrature_sum_de(g, q, self.tune_step_de(self.tune_step_plain(g, q)))

    # Names used in the reference implementation.
    fbtu = transform_plain
    fbt = transform_de
    ogatau = quadrature_sum_plain
    ogatat = quadrature_sum_de
    get_hu = tune_step_plain
    get_ht = tune_step_de
