"""
Configuration for the Shelly platform.

Mirrors the platform block of the bridge's config.json:

    {
        "platform": "Shelly",
        "username": "admin",
        "password": "secret",
        "requestTimeout": 8000,
        "staleTimeout": 28800000,
        "networkInterface": "192.168.1.10"
    }

Keys are accepted in camelCase (as written by the bridge UI) or snake_case.
Unknown keys are ignored.
"""

import json
import logging
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

PLUGIN_NAME = "shellybridge"
PLATFORM_NAME = "Shelly"


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


@dataclass
class PlatformConfig:
    """Options the platform forwards to the device library."""
    platform: str = PLATFORM_NAME
    username: Optional[str] = None
    password: Optional[str] = None
    request_timeout: Optional[int] = None    # milliseconds
    stale_timeout: Optional[int] = None      # milliseconds
    network_interface: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and self.password is not None

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "username": self.username,
            "password": self.password,
            "requestTimeout": self.request_timeout,
            "staleTimeout": self.stale_timeout,
            "networkInterface": self.network_interface,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlatformConfig":
        known_fields = {f.name for f in fields(cls)}
        filtered = {}
        for key, value in (data or {}).items():
            name = _snake_case(key)
            if name in known_fields:
                filtered[name] = value
            else:
                logger.debug(f"Ignoring unknown config key {key!r}")
        return cls(**filtered)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "PlatformConfig":
        """
        Load from a JSON file.

        The file may hold the platform block itself or a full bridge config
        with a ``platforms`` list, in which case the first block whose
        ``platform`` is ``Shelly`` is used.
        """
        with open(path, "r") as f:
            data = json.load(f)

        if isinstance(data, dict) and "platforms" in data:
            for block in data["platforms"]:
                if block.get("platform") == PLATFORM_NAME:
                    return cls.from_dict(block)
            logger.warning(f"No {PLATFORM_NAME} platform block in {path}, using defaults")
            return cls()

        return cls.from_dict(data)
