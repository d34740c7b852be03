"""Seed management API routes.

Saves a seed together with the config it should be generated with, so a
layout can be shared by id and rebuilt later.
"""
from dataclasses import replace

from flask import Blueprint, jsonify, request

from cavemesh import db
from cavemesh.dungeon import ConfigError, DungeonConfig, GenerationBusyError
from cavemesh.dungeon.seeds import coerce_seed
from cavemesh.models.layout import SavedLayout
from cavemesh.routes.dungeon_api import check_grid_limit, get_cached_layout

bp_seed = Blueprint("seed_api", __name__)


@bp_seed.errorhandler(ConfigError)
def _config_error(exc):
    return jsonify({"error": str(exc)}), 400


@bp_seed.errorhandler(GenerationBusyError)
def _busy_error(exc):
    return jsonify({"error": str(exc)}), 409


@bp_seed.route("/api/dungeon/seed", methods=["POST"])
def save_seed():
    """Save (or generate) a dungeon seed.

    Body JSON (all optional):
      { "seed": <int|str|null>, "regenerate": <bool>, "name": <str>, "config": {<DungeonConfig fields>} }
    - If seed omitted or null and regenerate true => random seed.
    - If seed provided (int or string) => digit strings read as ints, others hashed.

    Response: { "seed": <int>, "layout_id": <id> }
    """
    data = request.get_json(silent=True) or {}
    regenerate = data.get("regenerate")
    provided = data.get("seed", None)
    try:
        seed = coerce_seed(None) if regenerate and provided is None else coerce_seed(provided)
    except TypeError as exc:
        return jsonify({"error": str(exc)}), 400

    raw_config = data.get("config") or {}
    if not isinstance(raw_config, dict):
        raise ConfigError("config must be an object")
    config = replace(DungeonConfig.from_mapping(raw_config), seed=seed, use_random_seed=False)
    config = check_grid_limit(config.validate())

    layout = SavedLayout(seed=seed, name=data.get("name"), config=config.to_dict())
    db.session.add(layout)
    db.session.commit()
    return jsonify({"seed": seed, "layout_id": layout.id}), 201


@bp_seed.route("/api/dungeon/seed/<int:layout_id>", methods=["GET"])
def get_seed(layout_id: int):
    """Return a saved layout row plus a summary of the layout it rebuilds to."""
    layout = db.session.get(SavedLayout, layout_id)
    if layout is None:
        return jsonify({"error": "layout not found"}), 404
    config = replace(DungeonConfig.from_mapping(layout.config or {}), seed=layout.seed, use_random_seed=False)
    # the server limit may have been lowered since the row was saved
    result = get_cached_layout(check_grid_limit(config.validate()))
    payload = layout.to_dict()
    payload["summary"] = {
        "size": [result.width, result.height],
        "rooms": [r.to_dict() for r in result.rooms],
        "outlines": len(result.outlines),
        "metrics": result.metrics,
    }
    return jsonify(payload)
