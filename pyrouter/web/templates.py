from __future__ import annotations

import json
from pathlib import Path

PAGE_PATH = Path(__file__).with_name("static") / "base.html"
CONFIG_MARKER = "<!-- pyrouter:config -->"

FALLBACK_HTML = f"""<!doctype html>
<html>
  <head><meta charset="utf-8" /><title>pyrouter</title></head>
  <body>
    <pre id="route">base.html is missing, showing the bare client.</pre>
    {CONFIG_MARKER}
    <script src="/static/router.js"></script>
  </body>
</html>
"""


def load_page() -> str:
    try:
        return PAGE_PATH.read_text(encoding="utf-8")
    except OSError:
        return FALLBACK_HTML


BASE_HTML = load_page()


def render_page(mode: str, base: str = "") -> str:
    """Return the bootstrap page with the router's mode and base inlined."""
    config = json.dumps({"mode": mode, "base": base}).replace("<", "\\u003c")
    return BASE_HTML.replace(
        CONFIG_MARKER, f"<script>window.PYROUTER = {config};</script>", 1
    )
