"""Utilities for interacting with fbt TOML configs."""
import numpy as np
from datetime import datetime

from .. import __version__
from ..transform import FBT

#: Names available to function expressions given in a config.
_NAMESPACE = {
    name: getattr(np, name)
    for name in (
        "abs",
        "arctan",
        "cos",
        "cosh",
        "exp",
        "log",
        "log10",
        "pi",
        "power",
        "sin",
        "sinh",
        "sqrt",
        "tan",
        "tanh",
        "where",
    )
}
_NAMESPACE["np"] = np


def make_function(expr: str):
    """
    Build a function of ``x`` from a string expression.

    The expression is evaluated against common :mod:`numpy` functions, so for example
    ``"x * exp(-x**2 / 2)"`` and ``"x**2 * np.exp(-x)"`` are both valid.
    """
    code = compile(expr, "<function>", "eval")

    def g(x):
        return eval(code, _NAMESPACE, {"x": x})

    return g


def engine_to_dict(obj: FBT) -> dict:
    """Serialize an engine to a simple TOML-able dictionary."""
    return {
        "created_on": datetime.now(),
        "fbt_version": __version__,
        "params": dict(obj.config._asdict()),
    }
