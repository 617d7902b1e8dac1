"""Hydra-composed configuration shared by the engine, driver and CLI.

The composed configuration is kept as a module-level value so that the
factories (``create_search_engine``, ``create_driver``) can read it without
it being passed through every call. Nothing is loaded implicitly: until
``load_config`` runs, ``get_parameter`` hands back the caller's default.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf

from .validators import validate_config

logger = logging.getLogger(__name__)

_active_config: Optional[DictConfig] = None


def default_config_dir() -> Path:
    """The ``conf`` directory next to ``src``."""
    return Path(__file__).resolve().parents[3] / "conf"


class ConfigManager:
    """Composes ``<config_dir>/<name>.yaml`` with Hydra overrides."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Directory holding the YAML files; defaults to ``conf/``

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        self.config_dir = Path(config_dir or default_config_dir()).resolve()
        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")
        logger.debug(f"Using configuration directory {self.config_dir}")

    def compose(self, config_name: str = "config",
                overrides: Optional[List[str]] = None,
                validate: bool = True) -> DictConfig:
        """Compose a configuration.

        Args:
            config_name: File name without ``.yaml``
            overrides: Hydra override strings such as ``grid.width=12``
            validate: Run ``validate_config`` on the result

        Raises:
            ConfigValidationError: If validation is requested and fails
        """
        overrides = list(overrides or [])
        # Hydra refuses to initialize twice in one process
        GlobalHydra.instance().clear()
        try:
            with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
                cfg = compose(config_name=config_name, overrides=overrides)
        finally:
            GlobalHydra.instance().clear()

        if validate:
            validate_config(cfg)
        logger.info(f"Composed configuration '{config_name}' with overrides {overrides}")
        return cfg


def load_config(config_name: str = "config",
                overrides: Optional[List[str]] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Compose a configuration and make it the active one.

    Args:
        config_name: File name without ``.yaml``
        overrides: Hydra override strings
        config_dir: Directory holding the YAML files
        validate: Run ``validate_config`` before activating

    Returns:
        The active configuration
    """
    global _active_config
    try:
        cfg = ConfigManager(config_dir).compose(config_name, overrides, validate)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise
    _active_config = cfg
    return cfg


def get_config() -> Optional[DictConfig]:
    """The active configuration, or None before ``load_config``."""
    return _active_config


def reset_config() -> None:
    """Drop the active configuration."""
    global _active_config
    _active_config = None


def get_parameter(key: str, default: Any = None) -> Any:
    """Read a dotted key from the active configuration.

    Missing keys, null values and the absence of any loaded configuration
    all yield ``default``.
    """
    if _active_config is None:
        return default
    value = OmegaConf.select(_active_config, key, default=None)
    return default if value is None else value


def save_config(output_path: Union[str, Path], config: Optional[DictConfig] = None) -> Path:
    """Write ``config`` (the active one by default) as YAML.

    Raises:
        RuntimeError: If there is nothing to save
    """
    config = config if config is not None else _active_config
    if config is None:
        raise RuntimeError("No configuration loaded. Call load_config() first.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(OmegaConf.to_yaml(config, resolve=True))
    logger.info(f"Configuration saved to: {output_path}")
    return output_path
