"""YAML configuration loading and validation.

This module loads engine configuration from `.wikigraph/config.yaml` and
applies environment overrides (read through python-dotenv, so a `.env`
file in the working directory is honoured).

Protected slugs may come from the config file, the environment, or the
caller directly; the engine treats them purely as input.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError, ConfigFilesystemError
from .models import EngineConfig

logger = logging.getLogger(__name__)

ENV_PROTECTED_SLUGS = "WIKIGRAPH_PROTECTED_SLUGS"
ENV_SNAPSHOT_PATH = "WIKIGRAPH_SNAPSHOT_PATH"


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        protected_slugs: [admin, archive, hello]
        snapshot_path: .wikigraph/pages.yaml
        max_retries: 3

    Every field is optional. A missing file yields the defaults.

    Environment overrides (applied after the file):
        WIKIGRAPH_PROTECTED_SLUGS: comma-separated slugs
        WIKIGRAPH_SNAPSHOT_PATH: snapshot file path
    """

    DEFAULT_CONFIG_PATH = ".wikigraph/config.yaml"

    KNOWN_FIELDS = {"protected_slugs", "snapshot_path", "max_retries"}

    @classmethod
    def load(cls, config_path: Optional[str] = None, use_env: bool = True) -> EngineConfig:
        """Load configuration from a YAML file and the environment.

        Args:
            config_path: Path to the YAML file (default .wikigraph/config.yaml)
            use_env: Apply environment overrides (loads .env first)

        Returns:
            Validated EngineConfig

        Raises:
            ConfigFilesystemError: If the file exists but cannot be read
            ConfigError: If the configuration is invalid
        """
        config_path = config_path or cls.DEFAULT_CONFIG_PATH
        config_dict = cls._read(config_path)
        config = cls._parse_config(config_dict)

        if use_env:
            load_dotenv()
            cls._apply_env(config)

        logger.debug(
            f"Loaded config: protected_slugs={config.protected_slugs}, "
            f"snapshot_path={config.snapshot_path}"
        )
        return config

    @classmethod
    def save(cls, config_path: str, config: EngineConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigFilesystemError: If the file cannot be written
        """
        config_dict = {
            "protected_slugs": list(config.protected_slugs),
            "snapshot_path": config.snapshot_path,
            "max_retries": config.max_retries,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise ConfigFilesystemError(config_dir, "create_directory", str(e))

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(yaml_str)
        except PermissionError:
            raise ConfigFilesystemError(config_path, "write", "Permission denied")
        except OSError as e:
            raise ConfigFilesystemError(config_path, "write", str(e))

    @classmethod
    def _read(cls, config_path: str) -> Dict[str, Any]:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            # No config file means defaults
            return {}
        except PermissionError:
            raise ConfigFilesystemError(config_path, "read", "Permission denied")
        except OSError as e:
            raise ConfigFilesystemError(config_path, "read", str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )
        return config_dict

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> EngineConfig:
        """Parse and validate a configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        unknown = set(config_dict) - cls.KNOWN_FIELDS
        if unknown:
            logger.warning(f"Ignoring unknown config field(s): {', '.join(sorted(unknown))}")

        config = EngineConfig()

        if config_dict.get("protected_slugs") is not None:
            config.protected_slugs = cls._parse_slugs(
                config_dict["protected_slugs"], "protected_slugs"
            )

        if "snapshot_path" in config_dict:
            snapshot_path = config_dict["snapshot_path"]
            if not isinstance(snapshot_path, str) or not snapshot_path.strip():
                raise ConfigError("must be a non-empty string", "snapshot_path")
            config.snapshot_path = snapshot_path.strip()

        if "max_retries" in config_dict:
            max_retries = config_dict["max_retries"]
            # bool is an int subclass; reject it explicitly
            if isinstance(max_retries, bool) or not isinstance(max_retries, int):
                raise ConfigError(
                    f"must be an integer, got {type(max_retries).__name__}", "max_retries"
                )
            if max_retries < 0:
                raise ConfigError(f"must be at least 0, got {max_retries}", "max_retries")
            config.max_retries = max_retries

        return config

    @staticmethod
    def _parse_slugs(raw: Any, config_field: str) -> List[str]:
        if not isinstance(raw, list):
            raise ConfigError(f"must be a list, got {type(raw).__name__}", config_field)

        slugs = []
        for i, slug in enumerate(raw):
            if not isinstance(slug, str):
                raise ConfigError(
                    f"entries must be strings, got {type(slug).__name__}",
                    f"{config_field}[{i}]",
                )
            if not slug.strip():
                raise ConfigError("entries cannot be empty", f"{config_field}[{i}]")
            if slug not in slugs:
                slugs.append(slug)
        return slugs

    @classmethod
    def _apply_env(cls, config: EngineConfig) -> None:
        protected = os.getenv(ENV_PROTECTED_SLUGS)
        if protected is not None:
            slugs = [slug.strip() for slug in protected.split(",") if slug.strip()]
            if not slugs:
                raise ConfigError("must list at least one slug", ENV_PROTECTED_SLUGS)
            config.protected_slugs = cls._parse_slugs(slugs, ENV_PROTECTED_SLUGS)

        snapshot_path = os.getenv(ENV_SNAPSHOT_PATH)
        if snapshot_path:
            config.snapshot_path = snapshot_path
