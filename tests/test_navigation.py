import logging

import pytest

from pyrouter import (
    BrowserEnvironment,
    RouteNode,
    RouterContext,
    build_search_string,
    get_default_context,
    push,
    register_before_guard,
    replace,
)
from pyrouter.nav.navigation import MAX_REDIRECTS


@pytest.mark.parametrize(
    "query, expected",
    [
        (None, ""),
        ({}, ""),
        ({"b": None}, ""),
        ({"a": 1, "b": None, "c": "x y"}, "?a=1&c=x%20y"),
        ({"flag": True, "off": False}, "?flag=true&off=false"),
        ({"a&b": "c=d"}, "?a%26b=c%3Dd"),
        ({"path": "/x/y"}, "?path=%2Fx%2Fy"),
    ],
)
def test_build_search_string(query, expected):
    assert build_search_string(query) == expected


@pytest.mark.asyncio
async def test_push_adds_entry_and_updates_state(context):
    hooks = []
    context.guards.after_each(lambda f, t: hooks.append((f, t)))

    assert await context.push("/users/1", {"tab": "posts"}) is True

    env = context.environment
    assert env.href == "https://example.com/users/1?tab=posts"
    assert env.length == 2
    assert context.state.href == env.href
    assert context.state.pathname == "/users/1"
    assert context.state.query == {"tab": "posts"}
    assert hooks == [("/", "/users/1")]


@pytest.mark.asyncio
async def test_replace_overwrites_entry(context):
    assert await context.replace("/login") is True
    assert context.environment.length == 1
    assert context.state.pathname == "/login"


@pytest.mark.asyncio
async def test_cancelled_navigation_leaves_environment_untouched(context):
    hooks = []
    context.guards.before_each(lambda f, t: False)
    context.guards.after_each(lambda f, t: hooks.append(t))

    assert await context.push("/admin") is False
    assert context.environment.href == "https://example.com/"
    assert context.environment.length == 1
    assert context.state.pathname == "/"
    assert hooks == []


@pytest.mark.asyncio
async def test_guard_redirect_drops_query_and_reruns_guards(context):
    seen = []
    hooks = []

    def guard(f, t):
        seen.append(t)
        return "/login" if t == "/admin" else True

    context.guards.before_each(guard)
    context.guards.after_each(lambda f, t: hooks.append((f, t)))

    assert await context.push("/admin", {"next": "x"}) is True
    assert seen == ["/admin", "/login"]
    assert context.environment.pathname == "/login"
    assert context.environment.search == ""
    assert hooks == [("/", "/login")]


@pytest.mark.asyncio
async def test_async_guard_redirect(context):
    async def guard(f, t):
        return "/login" if t.startswith("/private") else None

    context.guards.before_each(guard)
    assert await context.push("/private/notes")
    assert context.state.pathname == "/login"


@pytest.mark.asyncio
async def test_redirect_loop_is_aborted(context, caplog):
    calls = []

    def ping_pong(f, t):
        calls.append(t)
        return "/b" if t == "/a" else "/a"

    context.guards.before_each(ping_pong)
    assert await context.push("/a") is False
    assert len(calls) == MAX_REDIRECTS
    assert context.environment.length == 1
    assert "Navigation aborted" in caplog.text


@pytest.mark.asyncio
async def test_route_redirect_is_followed():
    ctx = RouterContext(
        environment=BrowserEnvironment("https://example.com/"),
        routes=[
            RouteNode("/", redirect="/home"),
            RouteNode("/home", meta={"title": "Home"}),
            RouteNode(
                "/admin",
                children=[
                    RouteNode("", redirect="/admin/dashboard"),
                    RouteNode("dashboard", meta={"title": "Dashboard"}),
                ],
            ),
        ],
    )
    hooks = []
    ctx.guards.after_each(lambda f, t: hooks.append(t))

    assert await ctx.push("/")
    assert ctx.state.pathname == "/home"
    assert ctx.state.meta == {"title": "Home"}

    assert await ctx.push("/admin")
    assert ctx.state.pathname == "/admin/dashboard"
    assert ctx.state.meta == {"title": "Dashboard"}
    assert hooks == ["/home", "/admin/dashboard"]


@pytest.mark.asyncio
async def test_route_redirect_target_is_guarded():
    ctx = RouterContext(routes=[RouteNode("/old", redirect="/new"), RouteNode("/new")])
    ctx.guards.before_each(lambda f, t: t != "/new")
    assert await ctx.push("/old") is False
    assert ctx.state.pathname == "/"


@pytest.mark.asyncio
async def test_meta_cleared_when_nothing_matches():
    ctx = RouterContext(routes=[RouteNode("/home", meta={"title": "Home"})])
    await ctx.push("/home")
    assert ctx.state.meta == {"title": "Home"}
    await ctx.push("/missing")
    assert ctx.state.meta == {}


@pytest.mark.asyncio
async def test_back_and_forward_are_not_guarded(context):
    await context.push("/a")
    await context.push("/b")
    context.guards.before_each(lambda f, t: False)

    context.back()
    assert context.environment.pathname == "/a"
    assert context.state.pathname == "/a"
    assert context.state.href == context.environment.href

    context.forward()
    assert context.state.pathname == "/b"


@pytest.mark.asyncio
async def test_state_subscribers_see_every_commit(context):
    seen = []
    context.state.subscribe(seen.append)
    await context.push("/a")
    await context.replace("/b", {"x": 1})
    assert seen[-1] == "https://example.com/b?x=1"
    assert "https://example.com/a" in seen


@pytest.mark.asyncio
async def test_hash_mode_end_to_end():
    env = BrowserEnvironment("https://example.com/app/index.html")
    ctx = RouterContext(environment=env, mode="hash")
    hooks = []
    ctx.guards.after_each(lambda f, t: hooks.append((f, t)))

    assert await ctx.push("/users/1", {"tab": "posts"})
    assert env.href == "https://example.com/app/index.html#/users/1?tab=posts"
    assert env.pathname == "/app/index.html"
    assert ctx.state.pathname == "/users/1"
    assert ctx.state.query == {"tab": "posts"}
    assert ctx.state.hash == "#/users/1?tab=posts"

    assert await ctx.replace("/login")
    assert env.href == "https://example.com/app/index.html#/login"
    assert env.length == 2

    ctx.back()
    assert ctx.state.pathname == "/"
    assert hooks == [("/", "/users/1"), ("/users/1", "/login")]


@pytest.mark.asyncio
async def test_history_mode_with_base():
    env = BrowserEnvironment("https://example.com/app/")
    ctx = RouterContext(environment=env, mode={"mode": "history", "base": "/app"})
    assert ctx.state.pathname == "/"
    await ctx.push("/settings")
    assert env.href == "https://example.com/app/settings"
    assert ctx.state.pathname == "/settings"


@pytest.mark.asyncio
async def test_module_level_navigation_uses_default_context():
    calls = []
    register_before_guard(lambda f, t: calls.append((f, t)))

    assert await push("/x", {"a": 1})
    assert await replace("/y")

    ctx = get_default_context()
    assert ctx.environment.href == "http://localhost/y"
    assert ctx.environment.length == 2
    assert calls == [("/", "/x"), ("/x", "/y")]


@pytest.mark.asyncio
async def test_guard_exception_cancels(context, caplog):
    def broken(f, t):
        raise KeyError("session")

    context.guards.before_each(broken)
    with caplog.at_level(logging.ERROR):
        assert await context.push("/x") is False
    assert context.environment.length == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("mode, expected", [
    ("history", "https://example.com/users"),
    ("hash", "https://example.com/#/users"),
])
async def test_path_without_leading_separator_stays_on_origin(environment, mode, expected):
    ctx = RouterContext(environment=environment, mode=mode)
    assert await ctx.push("users")
    assert environment.href == expected
    assert environment.origin == "https://example.com"
    assert ctx.state.pathname == "/users"


def test_query_keeps_characters_left_alone_by_browsers():
    assert build_search_string({"q": "it's (ok)!*"}) == "?q=it's%20(ok)!*"
