import pytest

from fbt import FBT


@pytest.fixture(scope="session")
def engine0():
    return FBT(nu=0, N=200, Q=1.0)
