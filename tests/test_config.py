import pytest

import logging
import warnings

from fbt import config
from fbt.config import FallbackWarning, TransformConfig

# Need to do the following to catch repeated warnings.
warnings.simplefilter("always", UserWarning)


def test_valid_unchanged():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        cfg = TransformConfig.validated(nu=1.5, N=64, Q=2.0)

    assert cfg == (1.5, 64, 2.0)
    assert type(cfg.N) is int


def test_boundaries_accepted():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        cfg = TransformConfig.validated(nu=0, N=1, Q=1e-12)

    assert cfg.nu == 0.0
    assert cfg.N == 1
    assert cfg.Q == 1e-12


def test_nu_fallback():
    with pytest.warns(FallbackWarning):
        cfg = TransformConfig.validated(nu=-1, N=20, Q=3.0)

    assert cfg.nu == config.NU_DEFAULT
    assert cfg.N == 20
    assert cfg.Q == 3.0


def test_n_fallback():
    with pytest.warns(FallbackWarning):
        cfg = TransformConfig.validated(nu=1, N=0, Q=3.0)

    assert cfg.N == config.N_DEFAULT


@pytest.mark.parametrize("Q", [0, -5])
def test_q_fallback(Q):
    with pytest.warns(FallbackWarning):
        cfg = TransformConfig.validated(nu=1, N=5, Q=Q)

    assert cfg.Q == config.Q_DEFAULT


def test_nan_nu_fallback():
    with pytest.warns(FallbackWarning):
        cfg = TransformConfig.validated(nu=float("nan"))

    assert cfg.nu == config.NU_DEFAULT


def test_all_fallback_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="fbt.config"):
        with pytest.warns(FallbackWarning):
            cfg = TransformConfig.validated(nu=-1, N=-3, Q=-5)

    assert cfg == (config.NU_DEFAULT, config.N_DEFAULT, config.Q_DEFAULT)
    assert len(caplog.records) == 3
    assert "Q = -5" in caplog.text


def test_immutable():
    cfg = TransformConfig.validated()
    with pytest.raises(AttributeError):
        cfg.N = 5
