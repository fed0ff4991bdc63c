from pyrouter import BrowserEnvironment, RouterContext
from pyrouter.boot import run_terminal
from pyrouter.config import RouterSettings, configure_logging
from routes import ROUTES, auth_state, install_guards


if __name__ == "__main__":
    settings = RouterSettings.from_env()
    configure_logging(settings.log_level)
    context = RouterContext(
        environment=BrowserEnvironment(settings.initial_href),
        mode=settings.mode_config,
        routes=ROUTES,
    )
    install_guards(context)
    auth_state["logged_in"] = True
    run_terminal(context)
