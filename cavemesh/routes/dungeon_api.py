"""
project: Cavemesh
module: dungeon_api.py
License: MIT

Cave generation API routes.

Layouts are generated on demand from a seed plus config fields supplied in
the query string or JSON body. Finished layouts are cached in-process so the
fill-percent re-roll endpoint can reuse their rooms.
"""

import threading
from collections import OrderedDict
from dataclasses import replace

from flask import Blueprint, current_app, jsonify, request

from cavemesh.dungeon import ConfigError, DungeonConfig, DungeonGenerator, GenerationBusyError
from cavemesh.dungeon.export import result_to_dict
from cavemesh.dungeon.seeds import coerce_seed
from cavemesh.logging_utils import get_logger

log = get_logger("cavemesh.api")

bp_dungeon = Blueprint("dungeon", __name__)

# Simple in-process cache config-key -> GenerationResult, guarded by a lock
# because the dev server handles requests on threads.
_layout_cache: "OrderedDict[tuple, object]" = OrderedDict()
_layout_cache_lock = threading.Lock()
_LAYOUT_CACHE_MAX = 8  # small LRU cap

# One pass at a time across request threads; an overlapping miss gets a 409
_generator = DungeonGenerator()


def _cache_key(config: DungeonConfig) -> tuple:
    return tuple(sorted((k, tuple(v) if isinstance(v, list) else v) for k, v in config.to_dict().items()))


def clear_layout_cache():
    with _layout_cache_lock:
        _layout_cache.clear()


def get_cached_layout(config: DungeonConfig):
    """Return the layout for ``config`` (which must carry a concrete seed), generating it once."""
    if current_app.config.get("CAVEMESH_DISABLE_CACHE"):
        return _generator.generate(config)
    key = _cache_key(config)
    with _layout_cache_lock:
        result = _layout_cache.get(key)
        if result is not None:
            _layout_cache.move_to_end(key)
            return result
    result = _generator.generate(config)
    with _layout_cache_lock:
        _layout_cache[key] = result
        while len(_layout_cache) > _LAYOUT_CACHE_MAX:
            _layout_cache.popitem(last=False)
    return result


def _request_payload() -> dict:
    data = dict(request.args.items())
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update(body)
    return data


def _config_from_payload(data: dict) -> DungeonConfig:
    """Parse config fields, pin the seed and enforce the server's grid limit."""
    config = DungeonConfig.from_mapping(data)
    if config.use_random_seed:
        config = replace(config, seed=None, use_random_seed=False)
    try:
        seed = coerce_seed(config.seed)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
    return check_grid_limit(replace(config, seed=seed).validate())


def check_grid_limit(config: DungeonConfig) -> DungeonConfig:
    """Reject grids wider or taller than CAVEMESH_MAX_GRID."""
    max_grid = current_app.config.get("CAVEMESH_MAX_GRID", 200)
    if config.width > max_grid or config.height > max_grid:
        raise ConfigError(f"grid {config.width}x{config.height} exceeds the server limit of {max_grid}")
    return config


def _wants(name: str, default: bool) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@bp_dungeon.errorhandler(ConfigError)
def _config_error(exc):
    return jsonify({"error": str(exc)}), 400


@bp_dungeon.errorhandler(GenerationBusyError)
def _busy_error(exc):
    return jsonify({"error": str(exc)}), 409


@bp_dungeon.route("/api/dungeon/generate", methods=["GET", "POST"])
def generate_layout():
    """Generate (or fetch from cache) a layout.

    Query/body: any DungeonConfig field, e.g. ``seed``, ``width``, ``height``,
    ``fill_percent``. Query flags ``mesh=0`` drops mesh data and
    ``attributes=1`` adds per-vertex UVs and colours.
    Response: { seed, size, config, grid, rooms, cave_rooms, outlines, metrics, mesh, walls|edge_paths }
    """
    config = _config_from_payload(_request_payload())
    result = get_cached_layout(config)
    log.info(event="api_generate", seed=result.seed, width=result.width, height=result.height)
    return jsonify(result_to_dict(result, include_mesh=_wants("mesh", True), include_attributes=_wants("attributes", False)))


@bp_dungeon.route("/api/dungeon/regenerate-fill", methods=["POST"])
def regenerate_fill_route():
    """Re-roll the cave noise around an existing layout's rooms.

    Body: the layout's config fields (``seed`` required) with ``fill_percent``
    holding the NEW fill. ``base_fill_percent`` names the fill the layout was
    first generated with (defaults to the config default).
    """
    data = _request_payload()
    if data.get("seed") in (None, ""):
        raise ConfigError("seed is required to re-roll a layout")
    base_data = dict(data)
    base_data.pop("fill_percent", None)
    if "base_fill_percent" in data:
        base_data["fill_percent"] = data["base_fill_percent"]
    base_config = _config_from_payload(base_data)
    new_config = _config_from_payload(data)
    previous = get_cached_layout(base_config)
    result = _generator.regenerate_fill(new_config.fill_percent, previous=previous)
    log.info(
        event="api_regenerate_fill",
        seed=result.seed,
        base_fill=base_config.fill_percent,
        fill=new_config.fill_percent,
    )
    return jsonify(result_to_dict(result, include_mesh=_wants("mesh", True), include_attributes=_wants("attributes", False)))
