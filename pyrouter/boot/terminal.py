import asyncio
from typing import Callable, Optional

from pyrouter.core.context import RouterContext
from pyrouter.core.debug import FG_GRAY, FG_YELLOW, RESET, print_location, render_tree
from pyrouter.nav.state import parse_query

USAGE = {
    "push": ":push /path[?query]",
    "replace": ":replace /path[?query]",
    "open": ":open <url>",
}


def _split_target(dest: str):
    path, _, search = dest.partition("?")
    return path or "/", (parse_query(search) if search else None)


def _usage(cmd: str) -> None:
    print(f"{FG_GRAY}Usage:{RESET} {FG_YELLOW}{USAGE[cmd]}{RESET}")


async def handle_command(context: RouterContext, line: str) -> bool:
    """Run one REPL line against ``context``. Returns ``False`` to quit.

    Built-in commands:
      - :push <dest> / :replace <dest>  guarded navigation
      - :back / :forward                history traversal (not guarded)
      - :open <url>                     simulate the user typing a URL
      - :route                          print the current location
      - :tree                           print the route tree, active branch marked
      - :q | :quit | :exit              quit
    A bare path (``/users/1``) is the same as ``:push /users/1``.
    """
    s = (line or "").strip()
    if not s:
        return True
    if not s.startswith(":"):
        if s.startswith("/"):
            s = f":push {s}"
        else:
            print(f"{FG_GRAY}[router]{RESET} unknown input {s!r}")
            return True

    parts = s[1:].split(None, 1)
    if not parts:
        return True
    cmd = parts[0]
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd in ("q", "quit", "exit"):
        return False
    if cmd in ("push", "replace"):
        if not arg:
            _usage(cmd)
            return True
        path, query = _split_target(arg)
        ok = await getattr(context, cmd)(path, query)
        if not ok:
            print(f"{FG_GRAY}[router]{RESET} navigation to {path} was cancelled")
        return True
    if cmd == "back":
        context.back()
        return True
    if cmd == "forward":
        context.forward()
        return True
    if cmd == "open":
        if not arg:
            _usage(cmd)
            return True
        context.environment.assign(arg)
        context.state.sync()
        return True
    if cmd == "route":
        print_location(context.state.location(), context.matches())
        return True
    if cmd == "tree":
        render_tree(context.routes, active=context.matches())
        return True

    print(f"{FG_GRAY}[router]{RESET} unknown command :{cmd}")
    return True


async def read_terminal_commands(
    context: RouterContext,
    *,
    prompt: str = ">> ",
    input_fn: Optional[Callable[[str], str]] = None,
) -> None:
    """Read lines from stdin and feed them to :func:`handle_command`.

    Reading happens in an executor so the event loop (and any pending async
    guards) keeps running. Ctrl+C, EOF or ``:q`` stops the loop.
    """
    loop = asyncio.get_running_loop()
    read = input_fn or input
    try:
        while True:
            txt = await loop.run_in_executor(None, read, prompt)
            if not await handle_command(context, txt):
                break
    except (KeyboardInterrupt, EOFError):
        pass


def run_terminal(context: RouterContext, **kwargs) -> None:
    asyncio.run(read_terminal_commands(context, **kwargs))
