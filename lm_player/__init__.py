"""LM Player - personal video library and player."""

from lm_player.utils.config import APP_VERSION as __version__

__all__ = ["__version__"]
