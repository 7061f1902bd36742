"""
Intent bot: turns free-text chat input into a bot response.

A sentence is embedded, its intent classified, a slot (such as a location)
optionally extracted with a sequence tagger, and an intent-specific handler
produces the reply.
"""

from intentbot.config import Settings, get_settings, load_env_file
from intentbot.dependencies import build_session

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "load_env_file",

    # Session factory
    "build_session",
]
