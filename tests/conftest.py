import asyncio
import inspect
import sys

import pytest



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")

    config.addinivalue_line("markers", "asyncio: mark a test to run inside an event loop")



@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function):
    """Runs `async def` tests marked asyncio on a fresh event loop."""
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None
    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return None

    funcargs = pyfuncitem.funcargs
    testArgs = {name: funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    asyncio.run(pyfuncitem.obj(**testArgs))
    return True



@pytest.fixture(autouse=True)
def _isolatedSettings(monkeypatch, tmp_path):
    """Keep a developer's ~/.scenegroups/settings.json5 out of the tests."""
    from scenegroups.app import settings as settingsModule

    monkeypatch.setattr(settingsModule, "USER_SETTINGS_PATH", tmp_path / "no-such-settings.json5")
    settingsModule.loadSettings.cache_clear()
    yield
    settingsModule.loadSettings.cache_clear()
