# errors.py --------------------------------------------------


class RouterError(Exception):
    """Base class for every error raised by pyrouter."""


class PatternError(RouterError, ValueError):
    """A route template could not be compiled."""

    def __init__(self, template: str, reason: str):
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid route template {template!r}: {reason}")


class ConfigError(RouterError, ValueError):
    """Invalid router or mode configuration."""


class RedirectLoopError(RouterError):
    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__("Redirect chain too long: " + " -> ".join(self.chain))
