# Model package init
from .layout import SavedLayout  # noqa: F401 re-export

__all__ = ["SavedLayout"]
