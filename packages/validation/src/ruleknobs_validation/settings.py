"""Validator settings and their loaders (dict, YAML/JSON file, environment).
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from string import Formatter
from typing import Any

import yaml  # type: ignore[import-untyped]

from ruleknobs_common import ConfigurationError

from . import messages

logger = logging.getLogger(__name__)

ENV_PREFIX = "RULEKNOBS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ValidationSettings:
    """Knobs shared by every rule of a validator.

    Attributes:
        clock: Returns "now" for the date checks; read at evaluation time
        default_message: Template used when ``with_message(None)`` is called;
            ``{field}`` is replaced by the property name
        allow_blocking_in_loop: When ``validate()`` meets an asynchronous rule
            while an event loop is already running in the calling thread,
            resolve it on a worker thread (True) or raise OperationError (False)
    """

    clock: Callable[[], datetime] = field(default=datetime.now)
    default_message: str = messages.DEFAULT
    allow_blocking_in_loop: bool = True

    def __post_init__(self) -> None:
        _check_template(self.default_message)

    def now(self) -> datetime:
        return self.clock()

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> ValidationSettings:
        """Create settings from a configuration mapping.

        Unknown keys are ignored with a warning.

        Args:
            config: Mapping of setting names to values

        Returns:
            ValidationSettings instance
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in config.items():
            if key not in known:
                logger.warning(f"Ignoring unknown validation setting: {key}")
                continue
            if key == "allow_blocking_in_loop":
                value = _to_bool(key, value)
            elif key == "clock" and not callable(value):
                raise ConfigurationError(
                    "Setting 'clock' must be callable",
                    context={"setting": key, "value": repr(value)},
                )
            values[key] = value
        return cls(**values)

    @classmethod
    def from_file(cls, path: str | Path) -> ValidationSettings:
        """Load settings from a YAML or JSON file.

        Args:
            path: Path to a .yaml, .yml or .json file

        Returns:
            ValidationSettings instance

        Raises:
            ConfigurationError: If the file is missing, unreadable, or not a mapping
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Settings file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        try:
            with open(path, encoding="utf-8") as f:
                if suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported settings file format: {suffix}",
                        context={"path": str(path)},
                    )
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to parse settings file {path}: {e}",
                context={"path": str(path)},
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {path} must contain a mapping",
                context={"path": str(path), "type": type(data).__name__},
            )

        logger.debug(f"Loaded validation settings from {path}")
        return cls.from_dict(data.get("validation", data))

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> ValidationSettings:
        """Create settings from environment variables.

        ``RULEKNOBS_DEFAULT_MESSAGE`` and ``RULEKNOBS_ALLOW_BLOCKING_IN_LOOP``
        are recognized; the clock cannot be set from the environment.

        Args:
            prefix: Environment variable prefix
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ValidationSettings instance
        """
        environ = os.environ if environ is None else environ
        config: dict[str, Any] = {}
        for name in ("default_message", "allow_blocking_in_loop"):
            env_name = f"{prefix}{name.upper()}"
            if env_name in environ:
                config[name] = environ[env_name]
        return cls.from_dict(config)


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Setting '{key}' must be a boolean, got {value!r}",
        context={"setting": key, "value": repr(value)},
    )


def _check_template(template: Any) -> None:
    """Reject default messages with placeholders other than ``{field}``."""
    if not isinstance(template, str):
        raise ConfigurationError(
            "Setting 'default_message' must be a string",
            context={"setting": "default_message", "value": repr(template)},
        )
    try:
        names = {name for _, name, _, _ in Formatter().parse(template) if name is not None}
    except ValueError as e:
        raise ConfigurationError(
            f"Setting 'default_message' is not a valid template: {e}",
            context={"setting": "default_message", "value": template},
        ) from e
    unknown = names - {"field"}
    if unknown:
        raise ConfigurationError(
            "Setting 'default_message' may only use the {field} placeholder, "
            f"got {sorted(unknown)}",
            context={"setting": "default_message", "value": template},
        )
