import os

import pytest

from preview_media.host_preferences import COLOR_SCHEME_ENV_VAR, CONTRAST_ENV_VAR, REDUCED_MOTION_ENV_VAR


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required") and not os.getenv("PYQT_TESTS"):
        pytest.skip("PYQT_TESTS not set; skipping preview widget test")


@pytest.fixture(autouse=True)
def _isolate_host_preferences(monkeypatch):
    # Host preference env vars would otherwise leak into prefers-* expectations.
    for key in (COLOR_SCHEME_ENV_VAR, REDUCED_MOTION_ENV_VAR, CONTRAST_ENV_VAR):
        monkeypatch.delenv(key, raising=False)
