import re

from pyrouter import RouteNode, find_matching_routes
from pyrouter.core.debug import format_route_tree, print_location, render_tree
from pyrouter.nav.state import RouteLocation

ANSI = re.compile(r"\x1b\[[0-9;]*m")

ROUTES = [
    RouteNode(
        "/",
        children=[
            RouteNode("home", name="home"),
            RouteNode("users/:id", component="UserDetail", meta={"title": "User"}),
        ],
    ),
    RouteNode("/old", redirect="/home"),
]


def plain(lines):
    return [ANSI.sub("", line) for line in lines]


def test_tree_lists_full_paths():
    lines = plain(format_route_tree(ROUTES))
    assert lines == [
        "- /",
        "  - /home name='home'",
        "  - /users/:id component='UserDetail' meta={title='User'}",
        "- /old redirect='/home'",
    ]


def test_active_branch_is_marked():
    active = find_matching_routes(ROUTES, "/users/3")
    lines = plain(format_route_tree(ROUTES, active=active))
    assert lines[0].startswith("* /")
    assert lines[1].startswith("  - /home")
    assert lines[2].startswith("  * /users/:id")


def test_render_tree_prints(capsys):
    render_tree(ROUTES)
    out = ANSI.sub("", capsys.readouterr().out)
    assert "/users/:id" in out


def test_print_location(capsys):
    loc = RouteLocation(
        href="https://example.com/users/3?tab=a",
        pathname="/users/3",
        search="?tab=a",
        hash="",
        query={"tab": "a"},
        meta={"title": "User"},
    )
    print_location(loc, find_matching_routes(ROUTES, "/users/3"))
    out = ANSI.sub("", capsys.readouterr().out)
    assert "path: /users/3" in out
    assert "query: {'tab': 'a'}" in out
    assert "match: /users/:id {id='3'}" in out
    assert "hash:" not in out
