import pytest

from scalar_aad.config import use_config
from scalar_aad.core.tape import use_tape


@pytest.fixture(autouse=True)
def fresh_tape():
    """Every test records on its own tape with default thresholds."""
    with use_config():
        with use_tape() as tape:
            yield tape
