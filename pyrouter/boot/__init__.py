from .terminal import read_terminal_commands, run_terminal, handle_command
from .web import run_web

__all__ = [
    "run_web",
    "run_terminal",
    "read_terminal_commands",
    "handle_command",
]
