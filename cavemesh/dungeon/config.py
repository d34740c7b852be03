from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ConfigError

Seed = Union[int, str]


@dataclass
class DungeonConfig:
    width: int = 100
    height: int = 100
    seed: Optional[Seed] = None
    use_random_seed: bool = False
    fill_percent: int = 45
    min_room_size: int = 8
    max_room_size: int = 20
    room_attempts: int = 12
    smooth_passes: int = 3
    post_blend_smooths: int = 0
    wall_threshold_size: int = 40
    room_threshold_size: int = 50
    tunnel_radius: Tuple[int, int] = (2, 3)
    connect_regions: bool = False
    square_size: float = 1.0
    border_size: int = 1
    wall_height: float = 15.0
    is_2d: bool = False
    uv_tiles: int = 10

    def validate(self) -> "DungeonConfig":
        """Fail fast on unusable settings. Returns self for chaining."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"grid dimensions must be positive (got {self.width}x{self.height})")
        if self.width < 3 or self.height < 3:
            raise ConfigError("grid must be at least 3x3 to hold an interior cell")
        if not 0 <= self.fill_percent <= 100:
            raise ConfigError(f"fill_percent must be within [0, 100] (got {self.fill_percent})")
        if self.min_room_size <= 0:
            raise ConfigError("min_room_size must be positive")
        if self.min_room_size > self.max_room_size:
            raise ConfigError(
                f"min_room_size ({self.min_room_size}) exceeds max_room_size ({self.max_room_size})"
            )
        # Room plus a one-cell margin inside the border ring on each side
        if self.room_attempts > 0 and (self.max_room_size > self.width - 3 or self.max_room_size > self.height - 3):
            raise ConfigError(
                f"max_room_size {self.max_room_size} does not fit a {self.width}x{self.height} grid"
            )
        if self.room_attempts < 0 or self.smooth_passes < 0 or self.post_blend_smooths < 0:
            raise ConfigError("room_attempts and smoothing pass counts must be >= 0")
        if self.wall_threshold_size < 0 or self.room_threshold_size < 0:
            raise ConfigError("region thresholds must be >= 0")
        lo, hi = self.tunnel_radius
        if lo < 0 or lo > hi:
            raise ConfigError(f"invalid tunnel_radius range {self.tunnel_radius}")
        if self.square_size <= 0:
            raise ConfigError("square_size must be positive")
        # Without an outer ring the map edge would trace as an outline
        if self.border_size < 1:
            raise ConfigError(f"border_size must be >= 1 (got {self.border_size})")
        if self.wall_height < 0:
            raise ConfigError("wall_height must be >= 0")
        return self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["tunnel_radius"] = list(self.tunnel_radius)
        return d

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional["DungeonConfig"] = None) -> "DungeonConfig":
        """Build a config from loosely typed input (JSON body, query args, CLI).

        Unknown keys are ignored. Values are coerced to the field's type; a value
        that cannot be coerced raises ConfigError.
        """
        values = base.to_dict() if base is not None else {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            raw = data[f.name]
            try:
                values[f.name] = _coerce(f.name, raw)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"invalid value for {f.name}: {raw!r}") from exc
        if "tunnel_radius" in values:
            values["tunnel_radius"] = tuple(values["tunnel_radius"])
        return cls(**values)


_INT_FIELDS = {
    "width",
    "height",
    "fill_percent",
    "min_room_size",
    "max_room_size",
    "room_attempts",
    "smooth_passes",
    "post_blend_smooths",
    "wall_threshold_size",
    "room_threshold_size",
    "border_size",
    "uv_tiles",
}
_FLOAT_FIELDS = {"square_size", "wall_height"}
_BOOL_FIELDS = {"use_random_seed", "connect_regions", "is_2d"}


def _coerce(name: str, raw: Any) -> Any:
    if name in _INT_FIELDS:
        return int(raw)
    if name in _FLOAT_FIELDS:
        return float(raw)
    if name in _BOOL_FIELDS:
        if isinstance(raw, str):
            return raw.strip().lower() not in {"0", "false", "no", "off", ""}
        return bool(raw)
    if name == "tunnel_radius":
        if isinstance(raw, str):
            raw = raw.split(",")
        lo, hi = raw
        return (int(lo), int(hi))
    if name == "seed":
        if isinstance(raw, (int, str)) and not isinstance(raw, bool):
            return raw
        raise TypeError("seed must be int or str")
    return raw


__all__ = ["DungeonConfig", "Seed"]
