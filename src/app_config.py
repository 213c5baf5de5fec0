"""Application configuration module for the CSV localization tools."""
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, Tuple, Any

import yaml
from dotenv import load_dotenv

from src.logging_config import setup_logger

DEFAULT_CHUNK_SIZE = 100
DEFAULT_TEXT_COLUMN = 'English'
DEFAULT_CHUNK_OUTPUT_DIR = 'output_json'
DEFAULT_INPUT_CSV = 'english.csv'
DEFAULT_UPDATED_CSV_PATH = 'updated_english.csv'
DEFAULT_RESERVED_COLUMNS = ('Key', 'Comments', 'Timestamp')
DEFAULT_LOG_FILE_PATH = 'logs/csv_localizer.log'


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str

    # Chunk export/import settings
    chunk_size: int = DEFAULT_CHUNK_SIZE
    text_column: str = DEFAULT_TEXT_COLUMN
    chunk_output_dir: str = DEFAULT_CHUNK_OUTPUT_DIR
    default_input_csv: str = DEFAULT_INPUT_CSV
    updated_csv_path: str = DEFAULT_UPDATED_CSV_PATH

    # Columns never split into per-language files
    reserved_columns: Tuple[str, ...] = field(default=DEFAULT_RESERVED_COLUMNS)

    # Logging
    log_level: str = 'INFO'
    log_file_path: str = DEFAULT_LOG_FILE_PATH
    log_to_console: bool = True


def _compute_project_root() -> str:
    """Compute the project root directory."""
    script_real_path = os.path.realpath(__file__)
    script_dir = os.path.dirname(script_real_path)
    return os.path.abspath(os.path.join(script_dir, os.pardir))


def _load_dotenv_files(project_root: str) -> None:
    """Load the .env file from the project root, if present."""
    dotenv_path = os.path.join(project_root, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load the YAML configuration file, falling back to defaults on any problem."""
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('CSV_LOCALIZER_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    # The logger is configured from this file, so problems here go to stderr directly.
    try:
        if not os.path.exists(config_file):
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _resolve_chunk_size(config: Dict[str, Any]) -> int:
    """Chunk size from CHUNK_SIZE, then the config file, then the default."""
    raw_value = os.environ.get('CHUNK_SIZE', config.get('chunk_size', DEFAULT_CHUNK_SIZE))
    try:
        chunk_size = int(raw_value)
    except (TypeError, ValueError):
        raise ValueError(f"chunk_size must be an integer, got {raw_value!r}")
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    return chunk_size


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {}) or {}
    log_level_str = log_config.get('log_level', 'INFO').upper()
    log_file_path = log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH)
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def load_app_config() -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Environment variables win over the YAML file, which wins over the
    built-in defaults.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    logger = _setup_logger_from_config(config)

    chunk_size = _resolve_chunk_size(config)
    log_config = config.get('logging', {}) or {}
    reserved_columns = tuple(config.get('reserved_columns', DEFAULT_RESERVED_COLUMNS))

    app_config = AppConfig(
        project_root=project_root,
        chunk_size=chunk_size,
        text_column=os.environ.get('TEXT_COLUMN', config.get('text_column', DEFAULT_TEXT_COLUMN)),
        chunk_output_dir=os.environ.get('CHUNK_OUTPUT_DIR',
                                        config.get('chunk_output_dir', DEFAULT_CHUNK_OUTPUT_DIR)),
        default_input_csv=config.get('default_input_csv', DEFAULT_INPUT_CSV),
        updated_csv_path=os.environ.get('UPDATED_CSV_PATH',
                                        config.get('updated_csv_path', DEFAULT_UPDATED_CSV_PATH)),
        reserved_columns=reserved_columns,
        log_level=log_config.get('log_level', 'INFO').upper(),
        log_file_path=log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH),
        log_to_console=log_config.get('log_to_console', True),
    )
    logger.debug("Loaded configuration: %s", app_config)
    return app_config
