import os
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# The app reads these at import time, so they must be set before `cavemesh` is imported
_DB_DIR = tempfile.mkdtemp(prefix="cavemesh-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{Path(_DB_DIR, 'test.db').as_posix()}")
os.environ.setdefault("CAVEMESH_LOG_LEVEL", "warn")

from cavemesh import create_app  # noqa: E402
from cavemesh.routes.dungeon_api import clear_layout_cache  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    clear_layout_cache()
    test_app.config["CAVEMESH_DISABLE_CACHE"] = False
    test_app.config["CAVEMESH_MAX_GRID"] = 200
    return test_app.test_client()
