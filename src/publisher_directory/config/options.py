"""Option store backed by the loaded directory config."""

from __future__ import annotations

from publisher_directory.config.models import DirectoryConfig


class ConfigOptionStore:
    """Serves integer options from ``DirectoryConfig.options``."""

    def __init__(self, config: DirectoryConfig) -> None:
        self._options = dict(config.options)

    def get_option(self, key: str) -> int:
        try:
            return self._options[key]
        except KeyError:
            msg = f"Unknown option '{key}'"
            raise KeyError(msg) from None
