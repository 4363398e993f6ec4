import os
import sys

import pytest


# Ensure `src/backend` is on sys.path so imports like `import common...` work,
# even when pytest's rootdir is the repository root (pyproject.toml).
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
# Shared fakes (FakeTracker, sample patterns) used by the api tests as well.
HELPERS_DIR = os.path.join(BACKEND_DIR, "tests", "format_checker")
for path in (BACKEND_DIR, HELPERS_DIR):
    if path not in sys.path:
        sys.path.insert(0, path)


@pytest.fixture(autouse=True)
def _no_github_environment(monkeypatch):
    # Tests run without GitHub credentials or a config path from the environment.
    for name in ("GITHUB_TOKEN", "GITHUB_API_URL", "FORMAT_CHECKER_CONFIG"):
        monkeypatch.delenv(name, raising=False)
