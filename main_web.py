from pyrouter import BrowserEnvironment, RouterContext
from pyrouter.boot import run_web
from pyrouter.config import RouterSettings, configure_logging
from routes import ROUTES, install_guards


def build_context(settings: RouterSettings) -> RouterContext:
    context = RouterContext(
        environment=BrowserEnvironment(settings.initial_href),
        mode=settings.mode_config,
        routes=ROUTES,
    )
    install_guards(context)
    return context


if __name__ == "__main__":
    settings = RouterSettings.from_env()
    configure_logging(settings.log_level)
    run_web(build_context(settings), host=settings.host, port=settings.port)
