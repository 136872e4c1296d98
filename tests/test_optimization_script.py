from __future__ import annotations

import json
import re

from pagespeed_app import snippet
from pagespeed_app.optimization_script import minify_script, render_optimization_script
from pagespeed_app.schemas import SpeedSettings


def _embedded_config(script: str) -> dict:
    match = re.search(r"\}\)\((\{.*\})\);\s*$", script)
    assert match is not None
    return json.loads(match.group(1))


def test_render_embeds_settings_as_explicit_argument():
    script = render_optimization_script(SpeedSettings(enableLazyLoading=False, cacheExpiration=600))

    config = _embedded_config(script)
    assert config["enableLazyLoading"] is False
    assert config["cacheExpiration"] == 600
    assert "__OPTIMIZER_CONFIG__" not in script
    assert "function enableLazyLoading(config)" in script


def test_render_defaults_match_default_settings():
    assert _embedded_config(render_optimization_script()) == SpeedSettings().model_dump()


def test_minified_script_drops_comments_and_indentation():
    script = render_optimization_script(SpeedSettings(minifyJS=True))

    assert "/**" not in script
    assert not any(line.startswith("//") for line in script.splitlines())
    assert not any(line != line.strip() for line in script.splitlines())
    assert ".replace(/\\/\\*[\\s\\S]*?\\*\\//g, '')" in script


def test_unminified_script_keeps_comments():
    script = render_optimization_script(SpeedSettings(minifyJS=False))

    assert script.startswith("/**")
    assert "// Web Vitals: LCP, FID, CLS." in script


def test_rendered_script_is_safe_inside_the_injection_block():
    script = render_optimization_script()

    assert "</script" not in script
    assert "{{" not in script and "{%" not in script
    injected = snippet.inject("<html><head></head></html>", script)
    assert snippet.remove(injected) == "<html><head></head></html>"


def test_minify_script_keeps_code_lines_verbatim():
    source = "/* header */\n  var a = 'x // y';\n\n  // note\n  b();\n"

    assert minify_script(source) == "var a = 'x // y';\nb();"
