"""Example route tree and guards shared by the demo entry points."""

from pyrouter import RouteNode, RouterContext, find_matching_routes, match_route

ROUTES = [
    RouteNode(path="/", redirect="/home", name="root"),
    RouteNode(
        path="/",
        component="MainLayout",
        children=[
            RouteNode(path="home", component="Home", name="home", meta={"title": "Home"}),
            RouteNode(
                path="users",
                component="UserList",
                name="users",
                meta={"title": "User List", "requiresAuth": True},
            ),
            RouteNode(
                path="users/:id",
                component="UserDetail",
                name="user",
                meta={"title": "User Detail", "requiresAuth": True},
            ),
            RouteNode(path="login", component="Login", name="login", meta={"title": "Login"}),
        ],
    ),
    RouteNode(
        path="/admin",
        component="AdminLayout",
        meta={"requiresAuth": True, "requiresAdmin": True},
        children=[
            RouteNode(path="", redirect="/admin/dashboard"),
            RouteNode(path="dashboard", component="Dashboard", name="admin", meta={"title": "Admin Dashboard"}),
            RouteNode(path="settings", component="Settings", meta={"title": "System Settings"}),
        ],
    ),
    RouteNode(path="/:path(.*)", component="NotFound", meta={"title": "Page Not Found"}),
]

auth_state = {"logged_in": False, "is_admin": False}


def route_meta(context: RouterContext, path: str) -> dict:
    """Meta of every route on the matched branch, the leaf winning on conflicts."""
    merged = {}
    for m in find_matching_routes(context.routes, path):
        merged.update(m.meta)
    return merged


def install_guards(context: RouterContext) -> None:
    def auth_guard(from_path, to_path):
        meta = route_meta(context, to_path)
        if meta.get("requiresAuth") and not auth_state["logged_in"]:
            return "/login"
        if meta.get("requiresAdmin") and not auth_state["is_admin"]:
            return "/home"
        if to_path == "/login" and auth_state["logged_in"]:
            return "/home"
        return True

    def page_title(from_path, to_path):
        matched = match_route(context.routes, to_path)
        title = matched.meta.get("title") if matched else None
        print(f"[title] {title or 'pyrouter'}")

    context.guards.before_each(auth_guard)
    context.guards.after_each(page_title)
