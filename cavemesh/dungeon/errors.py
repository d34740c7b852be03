"""Exception types raised by the dungeon generation pipeline."""


class DungeonError(Exception):
    """Base class for all generation failures."""


class ConfigError(DungeonError, ValueError):
    """Raised before any generation work when a config is unusable."""


class MeshInvariantError(DungeonError, RuntimeError):
    """Triangulation or outline tracing produced a malformed result.

    Always a bug in the mesh stage; the pass that raised it publishes nothing.
    """


class GenerationBusyError(DungeonError, RuntimeError):
    """A generation pass is already running on this controller."""


__all__ = ["DungeonError", "ConfigError", "MeshInvariantError", "GenerationBusyError"]
