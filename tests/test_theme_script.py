from __future__ import annotations

import asyncio
import importlib.util
from pathlib import Path

import pytest

from pagespeed_app.script_injector import ScriptSyncResult

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "theme_script.py"
SHOP = "example.myshopify.com"

spec = importlib.util.spec_from_file_location("theme_script", SCRIPT_PATH)
assert spec is not None and spec.loader is not None
theme_script = importlib.util.module_from_spec(spec)
spec.loader.exec_module(theme_script)


def _fake_run(result: ScriptSyncResult, calls: list[tuple[str, str, str]]):
    async def fake_run(action: str, shop_domain: str, access_token: str) -> ScriptSyncResult:
        calls.append((action, shop_domain, access_token))
        return result

    return fake_run


def test_main_reports_success_with_exit_code_zero(monkeypatch, capsys):
    calls: list[tuple[str, str, str]] = []
    monkeypatch.setattr(
        theme_script,
        "run",
        _fake_run(ScriptSyncResult(ok=True, status="injected", theme_id=99), calls),
    )

    exit_code = theme_script.main("install", SHOP, "shpat_admin")

    assert exit_code == 0
    assert calls == [("install", SHOP, "shpat_admin")]
    assert capsys.readouterr().out == f"install on {SHOP}: status=injected themeId=99\n"


def test_main_reports_failure_with_exit_code_one(monkeypatch, capsys):
    monkeypatch.setattr(
        theme_script,
        "run",
        _fake_run(ScriptSyncResult(ok=False, status="failed", theme_id=None, error="Failed to load themes"), []),
    )

    exit_code = theme_script.main("uninstall", SHOP, "shpat_admin")

    assert exit_code == 1
    assert capsys.readouterr().out == (
        f"uninstall on {SHOP}: status=failed themeId=None\nerror: Failed to load themes\n"
    )


def test_main_treats_not_present_as_success(monkeypatch, capsys):
    monkeypatch.setattr(
        theme_script,
        "run",
        _fake_run(ScriptSyncResult(ok=True, status="not_present", theme_id=99), []),
    )

    assert theme_script.main("uninstall", SHOP, "shpat_admin") == 0
    assert "error:" not in capsys.readouterr().out


@pytest.mark.parametrize("action", ["install", "uninstall"])
def test_run_dispatches_to_workflow(monkeypatch, action):
    seen: list[tuple[str, str, str]] = []

    async def fake_install(client, snippet_source):
        seen.append(("install", client.shop_domain, snippet_source))
        return ScriptSyncResult(ok=True, status="injected")

    async def fake_uninstall(client):
        seen.append(("uninstall", client.shop_domain, ""))
        return ScriptSyncResult(ok=True, status="removed")

    monkeypatch.setattr(theme_script.script_injector, "install", fake_install)
    monkeypatch.setattr(theme_script.script_injector, "uninstall", fake_uninstall)

    result = asyncio.run(theme_script.run(action, SHOP, "shpat_admin"))

    assert result.ok
    assert [(name, shop) for name, shop, _ in seen] == [(action, SHOP)]
    if action == "install":
        assert seen[0][2].startswith("(function")
