"""Default parameters and the validated configuration of a transform engine."""
import logging
import warnings
from typing import NamedTuple

logger = logging.getLogger(__name__)

#: Bessel order used when a negative order is requested.
NU_DEFAULT = 0.0

#: Number of quadrature nodes used when fewer than one is requested.
N_DEFAULT = 10

#: Characteristic scale used when a non-positive scale is requested.
Q_DEFAULT = 1.0

#: Number of Bessel zeros tabulated on construction (about 2^15).
MAX_ZEROS = 32769

#: Largest untransformed step size returned by the step search.
MAX_STEP = 3.0


class FallbackWarning(UserWarning):
    """An unsupported parameter was replaced by its default."""

    pass


def _fallback(name, value, default):
    msg = (
        f"The value of {name} = {value} is not supported. "
        f"Falling back to default {name} = {default}."
    )
    logger.warning(msg)
    warnings.warn(msg, FallbackWarning)
    return default


class TransformConfig(NamedTuple):
    """
    Immutable configuration of a :class:`~fbt.transform.FBT` engine.

    Use :meth:`validated` to build one from arbitrary user input.
    """

    nu: float
    N: int
    Q: float

    @classmethod
    def validated(cls, nu=NU_DEFAULT, N=N_DEFAULT, Q=Q_DEFAULT) -> "TransformConfig":
        """
        Check each parameter independently, replacing bad ones by their defaults.

        Parameters
        ----------
        nu : float
            Order of the Bessel function, must be >= 0.
        N : int
            Number of function evaluations, must be >= 1.
        Q : float
            Characteristic scale of the transformed function, must be > 0.

        Returns
        -------
        config : :class:`TransformConfig`
            The validated configuration. A :class:`FallbackWarning` is emitted for
            each replaced value; this never raises for out-of-range values.
        """
        nu = float(nu) if nu >= 0 else _fallback("nu", nu, NU_DEFAULT)
        N = int(N) if N >= 1 else _fallback("N", N, N_DEFAULT)
        Q = float(Q) if Q > 0 else _fallback("Q", Q, Q_DEFAULT)
        return cls(nu=nu, N=N, Q=Q)
