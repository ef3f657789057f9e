from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

# the first draw on a cold start can exceed the input-generation time limit
settings.register_profile("netsup", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("netsup")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.property)
