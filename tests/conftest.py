import pytest

from src.utils.trace import reset_tracer


@pytest.fixture(autouse=True)
def fresh_tracer():
    # The tracer is process-wide; start every test with an empty one.
    reset_tracer()
    yield
    reset_tracer()
