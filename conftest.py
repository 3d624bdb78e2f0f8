import pytest

from nativebuild.utils.settings import Settings


@pytest.fixture(autouse=True)
def reset_settings():
    yield
    Settings().reset()
