import pytest

from iqfit.catalog import build_catalog
from tests.data import L_PAIR_SHAPES


@pytest.fixture(scope="session")
def catalog():
    return build_catalog()


@pytest.fixture(scope="session")
def l_pair_catalog():
    return build_catalog(L_PAIR_SHAPES, width=3, height=2)
