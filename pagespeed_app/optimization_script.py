from __future__ import annotations

import json
import re
from functools import lru_cache
from pathlib import Path

from pagespeed_app.schemas import SpeedSettings

_TEMPLATE_PATH = Path(__file__).resolve().parent / "static" / "optimization-script.js"
_CONFIG_PLACEHOLDER = "__OPTIMIZER_CONFIG__"
_LEADING_DOCBLOCK_RE = re.compile(r"\A\s*/\*.*?\*/\s*", re.DOTALL)


@lru_cache(maxsize=1)
def _load_template() -> str:
    template = _TEMPLATE_PATH.read_text(encoding="utf-8")
    if _CONFIG_PLACEHOLDER not in template:
        raise RuntimeError(f"{_TEMPLATE_PATH.name} is missing the {_CONFIG_PLACEHOLDER} placeholder")
    return template


def _config_literal(speed_settings: SpeedSettings) -> str:
    literal = json.dumps(speed_settings.model_dump(), sort_keys=True, separators=(",", ":"))
    # The snippet ends up inside an inline <script> element.
    return literal.replace("</", "<\\/")


def minify_script(source: str) -> str:
    """Drop the header docblock, full-line ``//`` comments, indentation and blank lines.

    Deliberately conservative: code on a line is never rewritten, so string and
    regex literals containing comment-like sequences survive untouched.
    """
    source = _LEADING_DOCBLOCK_RE.sub("", source)
    lines: list[str] = []
    for raw_line in source.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("//"):
            continue
        lines.append(line)
    return "\n".join(lines)


def render_optimization_script(speed_settings: SpeedSettings | None = None) -> str:
    speed_settings = speed_settings or SpeedSettings()
    script = _load_template().replace(_CONFIG_PLACEHOLDER, _config_literal(speed_settings))
    if speed_settings.minifyJS:
        return minify_script(script)
    return script.strip()
