import pytest

from pyrouter import BrowserEnvironment, RouterContext, clear_matcher_cache, reset_default_context


@pytest.fixture(autouse=True)
def _isolate_router():
    reset_default_context()
    clear_matcher_cache()
    yield
    reset_default_context()
    clear_matcher_cache()


@pytest.fixture
def environment():
    return BrowserEnvironment("https://example.com/")


@pytest.fixture
def context(environment):
    return RouterContext(environment=environment)
