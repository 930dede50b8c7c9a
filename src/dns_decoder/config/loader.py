"""Configuration loader for the record decoder.

Settings are layered in this order:

1. Dataclass defaults from ``schema``
2. An optional YAML document (JSON documents are valid YAML and load the same
   way), for example::

       decoder:
         max_pointer_jumps: 16
         utf8_errors: strict
       logging:
         level: DEBUG

3. Environment variables named ``DNS_DECODER_<SECTION>_<FIELD>``, such as
   ``DNS_DECODER_DECODER_MAX_POINTER_JUMPS=16``

Only fields declared by the section dataclasses are accepted.
"""

import os
from dataclasses import Field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .schema import DecoderConfig, DecoderSettings, LoggingConfig

ENV_PREFIX = "DNS_DECODER_"

SECTIONS = {
    "decoder": DecoderSettings,
    "logging": LoggingConfig,
}

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


class ConfigLoader:
    """Builds a DecoderConfig from a YAML file and the environment."""

    def __init__(
        self,
        config_file: Union[str, Path, None] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize configuration loader.

        Args:
            config_file: Path to a YAML configuration file
            environ: Variables to read overrides from, ``os.environ`` if None
        """
        self.config_file = Path(config_file) if config_file else None
        self.environ = os.environ if environ is None else environ

    def load_config(self) -> DecoderConfig:
        """Load and validate the configuration.

        Raises:
            FileNotFoundError: If the config file does not exist
            ValueError: On unknown keys or invalid values
            yaml.YAMLError: If the file is not valid YAML
        """
        values: Dict[str, Dict[str, Any]] = {name: {} for name in SECTIONS}

        if self.config_file is not None:
            for section, section_values in self._read_file().items():
                values[section].update(section_values)

        for section, section_cls in SECTIONS.items():
            values[section].update(self._read_environment(section, section_cls))

        return DecoderConfig(
            **{
                section: section_cls(**values[section])
                for section, section_cls in SECTIONS.items()
            }
        )

    def _read_file(self) -> Dict[str, Dict[str, Any]]:
        with open(self.config_file, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_file}")

        result = {}
        for section, section_values in document.items():
            if section not in SECTIONS:
                raise ValueError(f"Unknown configuration key: {section}")
            section_values = section_values or {}
            if not isinstance(section_values, dict):
                raise ValueError(f"Configuration section must be a mapping: {section}")

            known = {f.name for f in fields(SECTIONS[section])}
            for key in section_values:
                if key not in known:
                    raise ValueError(f"Unknown configuration key: {section}.{key}")

            result[section] = section_values

        return result

    def _read_environment(self, section: str, section_cls: type) -> Dict[str, Any]:
        overrides = {}
        for section_field in fields(section_cls):
            env_key = f"{ENV_PREFIX}{section.upper()}_{section_field.name.upper()}"
            if env_key in self.environ:
                overrides[section_field.name] = convert_env_value(
                    section_field, env_key, self.environ[env_key]
                )
        return overrides


def convert_env_value(section_field: Field, env_key: str, raw: str) -> Any:
    """Convert an environment string to the type of the field's default.

    Raises:
        ValueError: If the string does not fit the field type
    """
    default = section_field.default

    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for {env_key}: {raw}")

    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Invalid integer for {env_key}: {raw}") from None

    # Optional paths: an empty value switches the setting off
    if default is None:
        return raw or None

    return raw


def load_config(config_file: Union[str, Path, None] = None) -> DecoderConfig:
    """Load configuration from an optional file and the environment."""
    return ConfigLoader(config_file).load_config()


def resolve_config(config: Union[DecoderConfig, str, Path, None]) -> DecoderConfig:
    """Accept a ready configuration or a path to load one from.

    ``None`` gives the defaults without consulting the environment.
    """
    if config is None:
        return DecoderConfig()
    if isinstance(config, DecoderConfig):
        return config
    return load_config(config)
