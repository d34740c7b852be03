"""
project: Cavemesh
module: __init__.py
License: MIT

Flask application and core extensions setup.

This module wires together the Flask app and SQLAlchemy. Configuration is
sourced from environment variables with reasonable defaults for development.
A local `instance/` directory is used for SQLite, logs and other runtime data.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

# Instance-relative config so ./instance holds the SQLite database and logs
app = Flask(__name__, instance_relative_config=True)

os.makedirs(app.instance_path, exist_ok=True)

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

# During pytest runs, isolate to a separate test database
if not database_url:
    is_pytest = bool(os.getenv("PYTEST_CURRENT_TEST"))
    db_filename = "cavemesh_test.db" if is_pytest else "cavemesh.db"
    db_path = Path(app.instance_path) / db_filename
    # POSIX path for SQLAlchemy URI compatibility across OS
    database_url = f"sqlite:///{db_path.as_posix()}"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    # Largest width or height accepted by the HTTP API
    CAVEMESH_MAX_GRID=int(os.getenv("CAVEMESH_MAX_GRID", "200")),
    CAVEMESH_DISABLE_CACHE=_env_flag("CAVEMESH_DISABLE_CACHE"),
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,  # test client and dev server threads share the engine
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)


# Register HTTP blueprints (import after app/db created)
from cavemesh.routes.dungeon_api import bp_dungeon  # noqa: E402
from cavemesh.routes.seed_api import bp_seed  # noqa: E402

app.register_blueprint(bp_dungeon)
app.register_blueprint(bp_seed)


def create_app():
    """Return the Flask app instance with its tables created."""
    from cavemesh import models  # noqa: F401  (registers model tables)

    with app.app_context():
        db.create_all()
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
