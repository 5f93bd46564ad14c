"""A package for Hankel-type transforms using Ogata's quadrature."""
try:
    from importlib.metadata import PackageNotFoundError, version
except ImportError:
    from importlib_metadata import PackageNotFoundError, version

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    __version__ = "unknown"

from . import config, special, transform
from .config import FallbackWarning, TransformConfig
from .transform import (
    FBT,
    DegradedAccuracyWarning,
    EvaluationError,
    FBTError,
    ZeroTableError,
)
