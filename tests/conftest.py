from __future__ import annotations

import asyncio
import inspect
from pathlib import Path

import pytest


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run async test functions without requiring an asyncio pytest plugin."""

    test_func = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_func):
        names = inspect.signature(test_func).parameters
        kwargs = {name: pyfuncitem.funcargs[name] for name in names if name in pyfuncitem.funcargs}
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(test_func(**kwargs))
        finally:
            loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def _no_drafts_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BUILD_DRAFTS", raising=False)


@pytest.fixture()
def source_tree(tmp_path: Path) -> Path:
    """An empty ``src`` tree with data, includes and site directories."""
    source = tmp_path / "src"
    for name in ("data", "includes", "site"):
        (source / name).mkdir(parents=True, exist_ok=True)
    return source
