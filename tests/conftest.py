import pytest

from inliner.config import ClientConfig
from inliner.transport.api import InlinerApi
from tests.helpers import API, CDN, FakeTransport


@pytest.fixture
def config():
    return ClientConfig(api_key="test-key", api_url=API + "/", image_url=CDN + "/")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def api(config, transport):
    return InlinerApi(config, transport)
