"""
shop_config -- single public entrypoint for dashboard configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables directly.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``InvalidConfigError`` -- the document fails validation.

Every successful call emits a ``SHOP_CONFIG_TRACE`` log entry carrying the
config id, version and checksum.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from shop_config.loader import load_config_file, log_level_value, parse_config
from shop_config.schema import ShopConfig

_logger = logging.getLogger("shop_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "SHOP_CONFIG_PATH"


def get_active_config(config_path: Path | None = None) -> ShopConfig:
    """The ONLY public configuration entrypoint.

    Resolution order: explicit ``config_path``, then the file named by the
    ``SHOP_CONFIG_PATH`` environment variable, then the bundled default.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        config_path = Path(env_path) if env_path else _DEFAULT_CONFIG_PATH

    config = load_config_file(config_path)

    _logger.info(
        "SHOP_CONFIG_TRACE",
        extra={
            "trace_type": "SHOP_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(config_path),
        },
    )
    return config


__all__ = [
    "CONFIG_PATH_ENV",
    "ShopConfig",
    "get_active_config",
    "load_config_file",
    "log_level_value",
    "parse_config",
]
