def run_web(context, *, host="127.0.0.1", port=8000, reload=False, **uvicorn_kwargs):
    """Serve ``context`` through the websocket bridge with uvicorn."""
    import uvicorn
    from pyrouter.web.server import create_fastapi_app

    fastapi_app = create_fastapi_app(context)
    uvicorn.run(fastapi_app, host=host, port=port, reload=reload, **uvicorn_kwargs)
