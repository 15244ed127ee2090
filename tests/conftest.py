import gc

import pytest


@pytest.fixture(scope="session", autouse=True)
def _try_cleaning_up_on_autouse_fixture_teardown():
    yield
    for _ in range(10):
        gc.collect()


def pytest_sessionfinish(session, exitstatus):
    for _ in range(10):
        gc.collect()
