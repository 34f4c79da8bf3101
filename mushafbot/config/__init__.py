"""Configuration module for mushafbot."""

from mushafbot.config.loader import load_config, save_config, get_config_path, get_data_dir
from mushafbot.config.schema import Config

__all__ = ["Config", "load_config", "save_config", "get_config_path", "get_data_dir"]
