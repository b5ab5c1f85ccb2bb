import pytest

from cryptengine.config import EngineConfig


@pytest.fixture
def config():
    return EngineConfig()
