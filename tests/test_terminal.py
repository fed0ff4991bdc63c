import re

import pytest

from pyrouter import RouteNode, RouterContext
from pyrouter.boot.terminal import handle_command, read_terminal_commands

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def output(capsys):
    return ANSI.sub("", capsys.readouterr().out)


@pytest.fixture
def ctx(environment):
    return RouterContext(
        environment=environment,
        routes=[
            RouteNode("/users/:id", name="user", meta={"title": "User"}),
            RouteNode("/admin", meta={"title": "Admin"}),
        ],
    )


@pytest.mark.asyncio
async def test_push_with_query(ctx):
    assert await handle_command(ctx, ":push /users/4?tab=posts")
    assert ctx.state.pathname == "/users/4"
    assert ctx.state.query == {"tab": "posts"}
    assert ctx.state.meta == {"title": "User"}


@pytest.mark.asyncio
async def test_bare_path_pushes(ctx):
    await handle_command(ctx, "/admin")
    assert ctx.environment.length == 2
    assert ctx.state.pathname == "/admin"


@pytest.mark.asyncio
async def test_replace(ctx):
    await handle_command(ctx, ":replace /admin")
    assert ctx.environment.length == 1
    assert ctx.state.pathname == "/admin"


@pytest.mark.asyncio
async def test_cancelled_navigation_is_reported(ctx, capsys):
    ctx.guards.before_each(lambda f, t: False)
    assert await handle_command(ctx, ":push /admin")
    assert "navigation to /admin was cancelled" in output(capsys)
    assert ctx.state.pathname == "/"


@pytest.mark.asyncio
async def test_back_and_forward(ctx):
    await handle_command(ctx, "/admin")
    await handle_command(ctx, ":back")
    assert ctx.state.pathname == "/"
    await handle_command(ctx, ":forward")
    assert ctx.state.pathname == "/admin"


@pytest.mark.asyncio
async def test_open_simulates_typed_url(ctx):
    await handle_command(ctx, ":open https://example.com/users/9")
    assert ctx.environment.href == "https://example.com/users/9"
    assert ctx.state.href == "https://example.com/users/9"


@pytest.mark.asyncio
async def test_route_prints_location(ctx, capsys):
    await handle_command(ctx, "/users/2")
    capsys.readouterr()
    await handle_command(ctx, ":route")
    out = output(capsys)
    assert "path: /users/2" in out
    assert "match: /users/:id {id='2'}" in out


@pytest.mark.asyncio
async def test_tree_marks_active_route(ctx, capsys):
    await handle_command(ctx, "/admin")
    await handle_command(ctx, ":tree")
    out = output(capsys)
    assert "* /admin" in out
    assert "- /users/:id" in out


@pytest.mark.asyncio
@pytest.mark.parametrize("line", [":push", ":replace", ":open"])
async def test_missing_argument_prints_usage(ctx, capsys, line):
    assert await handle_command(ctx, line)
    assert "Usage:" in output(capsys)


@pytest.mark.asyncio
@pytest.mark.parametrize("line", ["", "   ", ":", "hello", ":dance"])
async def test_noise_keeps_running(ctx, line):
    assert await handle_command(ctx, line) is True
    assert ctx.environment.length == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("line", [":q", ":quit", ":exit"])
async def test_quit(ctx, line):
    assert await handle_command(ctx, line) is False


@pytest.mark.asyncio
async def test_read_loop_until_quit(ctx):
    lines = iter(["/admin", ":push /users/1", ":q", "/never"])
    await read_terminal_commands(ctx, input_fn=lambda prompt: next(lines))
    assert ctx.state.pathname == "/users/1"


@pytest.mark.asyncio
async def test_read_loop_stops_on_eof(ctx):
    def read(prompt):
        raise EOFError

    await read_terminal_commands(ctx, input_fn=read)
    assert ctx.state.pathname == "/"
