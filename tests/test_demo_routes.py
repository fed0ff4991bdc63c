import pytest

from pyrouter import BrowserEnvironment, RouterContext
from routes import ROUTES, auth_state, install_guards, route_meta


@pytest.fixture
def demo():
    ctx = RouterContext(environment=BrowserEnvironment("https://example.com/"), routes=ROUTES)
    install_guards(ctx)
    return ctx


def login(monkeypatch, *, admin=False):
    monkeypatch.setitem(auth_state, "logged_in", True)
    monkeypatch.setitem(auth_state, "is_admin", admin)


def test_meta_is_merged_along_the_branch(demo):
    meta = route_meta(demo, "/admin/dashboard")
    assert meta["requiresAuth"] is True
    assert meta["requiresAdmin"] is True
    assert meta["title"] == "Admin Dashboard"


@pytest.mark.asyncio
async def test_nested_admin_page_requires_login(demo):
    assert await demo.push("/admin/dashboard")
    assert demo.state.pathname == "/login"


@pytest.mark.asyncio
async def test_non_admin_is_sent_home(demo, monkeypatch):
    login(monkeypatch)
    assert await demo.push("/admin/settings")
    assert demo.state.pathname == "/home"
    assert demo.state.meta["title"] == "Home"


@pytest.mark.asyncio
async def test_admin_follows_the_section_redirect(demo, monkeypatch):
    login(monkeypatch, admin=True)
    assert await demo.push("/admin")
    assert demo.state.pathname == "/admin/dashboard"


@pytest.mark.asyncio
async def test_logged_in_user_skips_login_page(demo, monkeypatch):
    login(monkeypatch)
    assert await demo.push("/login")
    assert demo.state.pathname == "/home"
