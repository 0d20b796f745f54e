from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

from openref.config._env import resolve
from openref.config._error import ConfigError

if sys.version_info < (3, 11):
    import tomli
else:
    import tomllib as tomli

__all__ = ["OpenRefConfig", "ConfigError", "CONFIG_FILE_NAME"]

CONFIG_FILE_NAME = "openref.toml"


@dataclass(repr=False)
class OpenRefConfig:
    external_refs: bool
    remote_refs: bool
    encoding: str
    _config_path: str | None

    __slots__ = ("external_refs", "remote_refs", "encoding", "_config_path")

    def __init__(
        self,
        *,
        external_refs: bool = False,
        remote_refs: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self.external_refs = external_refs
        self.remote_refs = remote_refs
        self.encoding = encoding
        self._config_path = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(external_refs={self.external_refs!r}, "
            f"remote_refs={self.remote_refs!r}, encoding={self.encoding!r})"
        )

    @property
    def config_path(self) -> str | None:
        """Filesystem path to the loaded configuration file, if any.

        Returns None if using default configuration.
        """
        return self._config_path

    @classmethod
    def discover(cls) -> OpenRefConfig:
        """Discover the openref configuration file.

        Search for 'openref.toml' in the current directory and then in each parent directory,
        stopping when a directory containing a '.git' folder is encountered or the filesystem root is reached.
        If a config file is found, load it; otherwise, return a default configuration.
        """
        current_dir = os.getcwd()
        config_file = None

        while True:
            candidate = os.path.join(current_dir, CONFIG_FILE_NAME)
            if os.path.isfile(candidate):
                config_file = candidate
                break

            # Stop searching if we've reached a git repository root
            if os.path.isdir(os.path.join(current_dir, ".git")):
                break

            # Stop if we've reached the filesystem root
            parent = os.path.dirname(current_dir)
            if parent == current_dir:
                break
            current_dir = parent

        if config_file:
            return cls.from_path(config_file)
        return cls()

    def update(
        self,
        *,
        external_refs: bool | None = None,
        remote_refs: bool | None = None,
        encoding: str | None = None,
    ) -> None:
        """Override options, e.g. from the command line. `None` keeps the current value."""
        if external_refs is not None:
            self.external_refs = external_refs
        if remote_refs is not None:
            self.remote_refs = remote_refs
        if encoding is not None:
            self.encoding = encoding

    @classmethod
    def from_path(cls, path: PathLike | str) -> OpenRefConfig:
        """Load configuration from a file path."""
        with open(path, encoding="utf-8") as fd:
            config = cls.from_str(fd.read())
            config._config_path = str(Path(path).resolve())
            return config

    @classmethod
    def from_str(cls, data: str) -> OpenRefConfig:
        """Parse configuration from a string."""
        try:
            parsed = tomli.loads(data)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML: {exc}") from exc
        return cls.from_dict(parsed)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OpenRefConfig:
        """Create a config instance from a dictionary."""
        from jsonschema.exceptions import ValidationError

        from openref.config._validator import CONFIG_VALIDATOR

        try:
            CONFIG_VALIDATOR.validate(data)
        except ValidationError as exc:
            raise ConfigError.from_validation_error(exc) from None
        return cls(
            external_refs=data.get("external-refs", False),
            remote_refs=data.get("remote-refs", False),
            encoding=resolve(data.get("encoding", "utf-8")),
        )
