# conftest.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import pytest

from geometry_service import GeometryServiceProvider


@pytest.fixture(autouse=True)
def reset_geometry_services():
    GeometryServiceProvider.set_instance(None)
    yield
    GeometryServiceProvider.set_instance(None)
