from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from pyrouter.core.context import RouterContext
from pyrouter.core.environment import Commit
from pyrouter.router.router import iter_routes

from .broadcast import InMemoryBroadcast
from .input_consumer import InputConsumer
from .state import ServerState
from .templates import render_page
from .ws_endpoint import CHAN_INPUT, CHAN_NAV, CHAN_ROUTE, register_ws_routes

logger = logging.getLogger(__name__)

EXTERNAL_EVENTS = ("popstate", "hashchange")


def route_payload(context: RouterContext) -> Dict[str, Any]:
    location = context.state.location()
    return {
        "type": "route",
        "location": location.to_dict(),
        "matches": [m.to_dict() for m in context.matches(location.pathname)],
    }


def routes_catalog(context: RouterContext) -> List[Dict[str, Any]]:
    return [
        {
            "path": full_path,
            "name": node.name,
            "redirect": node.redirect,
            "meta": dict(node.meta),
        }
        for full_path, node in iter_routes(context.routes)
    ]


def create_fastapi_app(context: RouterContext) -> FastAPI:
    """Create a FastAPI app that mirrors a browser tab into ``context``.

    The page served at any path opens ``/ws`` and reports the tab's location
    changes; navigations made through ``context`` are sent back so the tab
    can replay them with the History API. One tab is assumed: every socket
    drives the same environment.
    """
    app = FastAPI()
    static_dir = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    state = ServerState(broadcast=InMemoryBroadcast(retain=[CHAN_ROUTE]))
    app.state.server_state = state
    app.state.router_context = context

    async def _handle_input_message(msg: dict) -> None:
        t = msg.get("t")

        if t == "hello" or t in EXTERNAL_EVENTS:
            href = msg.get("href")
            if not isinstance(href, str) or not href:
                logger.warning("Ignoring %s message without href", t)
                return
            # hello only syncs; back/forward events are observed, never guarded
            context.environment.apply_external(href, None if t == "hello" else t)
            if t == "hello":
                context.state.sync()
            return

        if t in ("push", "replace"):
            to = msg.get("to") or "/"
            query = msg.get("query") if isinstance(msg.get("query"), dict) else None
            ok = await getattr(context, t)(to, query)
            if not ok:
                await state.broadcast.publish(
                    CHAN_NAV, {"type": "cancelled", "to": to}
                )
            return

        if t == "back":
            context.back()
        elif t == "forward":
            context.forward()
        else:
            logger.debug("Unknown client message type %r", t)

    def _on_commit(commit: Commit) -> None:
        if commit.get("type") == "traverse":
            payload = {"type": "traverse", "delta": commit.get("delta", 0)}
        else:
            payload = {"type": "nav", "action": commit.get("type"), "href": commit.get("href")}
        state.spawn(state.broadcast.publish(CHAN_NAV, payload))

    def _on_url_change(_href: str) -> None:
        state.spawn(state.broadcast.publish(CHAN_ROUTE, route_payload(context)))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # make sure the adapter (and its change listener) exists before clients talk
        context.mode
        unsubscribe_commits = context.environment.subscribe(_on_commit)
        unsubscribe_state = context.state.subscribe(_on_url_change)

        input_consumer = InputConsumer(
            broadcast=state.broadcast,
            input_channel=CHAN_INPUT,
            handle_message=_handle_input_message,
        )
        input_task = asyncio.create_task(input_consumer.run())

        try:
            yield
        finally:
            unsubscribe_commits()
            unsubscribe_state()
            input_task.cancel()
            for task in list(state.tasks):
                task.cancel()

    app.router.lifespan_context = lifespan

    register_ws_routes(
        app,
        broadcast=state.broadcast,
        channels_to_forward=[CHAN_NAV, CHAN_ROUTE],
        input_channel=CHAN_INPUT,
    )

    @app.get("/favicon.ico")
    async def favicon():
        return Response(status_code=204, media_type="image/x-icon")

    @app.get("/_router/location")
    async def location():
        return route_payload(context)

    @app.get("/_router/match")
    async def match(path: str = "/"):
        matched = context.match(path)
        return {
            "path": path,
            "match": matched.to_dict() if matched is not None else None,
            "matches": [m.to_dict() for m in context.matches(path)],
        }

    @app.get("/_router/routes")
    async def routes():
        return JSONResponse(routes_catalog(context))

    @app.get("/{full_path:path}")
    async def index(_request: Request):
        adapter = context.mode
        return HTMLResponse(render_page(adapter.get_mode(), getattr(adapter, "base", "")))

    return app
