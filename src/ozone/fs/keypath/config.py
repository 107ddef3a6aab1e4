"""The `KeyLayout` class captures the embedding-time choices of a key namespace: its delimiter and bucket layout."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from json import JSONDecodeError
from pathlib import Path
from typing import Any, BinaryIO, ClassVar

from yaml import YAMLError, safe_load

from ozone.fs.keypath import _keysep

logger = logging.getLogger(__name__)

Json = dict[str, Any]

__all__ = ["KeyLayout", "IllegalState", "SerdeError"]

OZONE_OM_LAYOUT_VERSION = "ozone.om.layout.version"
OZONE_OM_LAYOUT_VERSION_V1 = "V1"
OZONE_OM_ENABLE_FILESYSTEM_PATHS = "ozone.om.enable.filesystem.paths"


class IllegalState(ValueError):
    pass


class SerdeError(TypeError):
    """Raised when a layout cannot be serialized or deserialized."""


@dataclass(frozen=True)
class KeyLayout:
    """How keys are laid out in the buckets of one store.

    Layouts are chosen once, when a namespace is embedded, and never per call. The defaults describe the usual
    filesystem-optimized layout: keys delimited by '/', and a bucket counting as filesystem-optimized when its
    metadata carries layout version `V1` with filesystem paths enabled.
    """

    __version__: ClassVar[int] = 1

    delimiter: str = _keysep.sep
    """The single character between key components."""

    layout_version: str = OZONE_OM_LAYOUT_VERSION_V1
    """The layout version token (compared case-insensitively) that marks a filesystem-optimized bucket."""

    layout_version_key: str = OZONE_OM_LAYOUT_VERSION
    """The bucket metadata key holding the layout version."""

    enable_filesystem_paths_key: str = OZONE_OM_ENABLE_FILESYSTEM_PATHS
    """The bucket metadata key holding the boolean 'filesystem paths enabled' flag."""

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise IllegalState(f"delimiter must be a single character, got: {self.delimiter!r}")
        if self.delimiter in {":", "."}:
            raise IllegalState(f"delimiter collides with component validation: {self.delimiter!r}")
        for field in ("layout_version", "layout_version_key", "enable_filesystem_paths_key"):
            if not getattr(self, field):
                raise IllegalState(f"{field}: must not be empty")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> KeyLayout:
        """Build a layout from its serialized form.

        A missing `version` means version 1. Older versions are upgraded through `v<N>_migrate()` static methods,
        should the format ever change.
        """
        as_dict = cls._migrate(dict(raw))
        known = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(as_dict) - known)
        if unknown:
            raise SerdeError(f"unknown fields: {', '.join(unknown)}")
        for name, value in as_dict.items():
            if not isinstance(value, str):
                raise SerdeError(f"{name}: not a str: {value!r}")
        return cls(**as_dict)

    @classmethod
    def load(cls, path: str | Path) -> KeyLayout:
        """Load a layout from a `.json`, `.yml` or `.yaml` file."""
        path = Path(path)
        converters: dict[str, Callable[[BinaryIO], Any]] = {
            "json": json.load,
            "yml": cls._load_yaml,
            "yaml": cls._load_yaml,
        }
        extension = path.name.split(".")[-1]
        if extension not in converters:
            raise KeyError(f"Unknown extension: {extension}")
        with path.open("rb") as f:
            try:
                as_dict = converters[extension](f)
            except JSONDecodeError as err:
                raise SerdeError(f"{path.name}: {err}") from err
        if not isinstance(as_dict, dict):
            raise SerdeError(f"{path.name}: not a mapping: {as_dict!r}")
        logger.debug(f"Loading key layout from {path}")
        return cls.from_dict(as_dict)

    def as_dict(self) -> Json:
        as_dict: Json = dataclasses.asdict(self)
        as_dict["version"] = self.__version__
        return as_dict

    @classmethod
    def _migrate(cls, as_dict: Json) -> Json:
        expected_version = cls.__version__
        actual_version = as_dict.pop("version", 1)
        while actual_version < expected_version:
            migrate = getattr(cls, f"v{actual_version}_migrate", None)
            if not migrate:
                break
            logger.debug(f"Migrating key layout from v{actual_version}")
            as_dict = migrate(as_dict)
            prev_version = actual_version
            actual_version = as_dict.pop("version", 1)
            if actual_version == prev_version:
                raise IllegalState(f"cannot migrate key layout from v{prev_version}")
        if actual_version != expected_version:
            raise IllegalState(f"expected key layout version={expected_version}, got={actual_version}")
        return as_dict

    @staticmethod
    def _load_yaml(raw: BinaryIO) -> Json:
        try:
            return safe_load(raw)
        except YAMLError as err:
            raise JSONDecodeError(str(err), "<yaml>", 0) from err
