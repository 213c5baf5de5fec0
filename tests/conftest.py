import csv
import json
import logging
import os

import pytest

from src.app_config import AppConfig
from src.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_tool_logger():
    """
    Route the tool logger through the root logger so caplog sees its records,
    and undo any handlers a test installed via setup_logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.propagate, logger.level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.DEBUG)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    handlers, propagate, level = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.propagate = propagate
    logger.setLevel(level)


@pytest.fixture
def write_csv(tmp_path):
    """Factory writing a CSV file under tmp_path from a header and row lists."""
    def _write(name, header, rows):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
        return str(path)
    return _write


@pytest.fixture
def read_csv():
    """Read a CSV file back as (header, rows) of plain lists."""
    def _read(path):
        with open(path, 'r', encoding='utf-8', newline='') as f:
            all_rows = list(csv.reader(f))
        return all_rows[0], all_rows[1:]
    return _read


@pytest.fixture
def write_chunk(tmp_path):
    """Factory writing a chunk JSON file; returns its path."""
    def _write(name, values, folder='output_json'):
        chunk_dir = tmp_path / folder
        chunk_dir.mkdir(parents=True, exist_ok=True)
        path = chunk_dir / name
        path.write_text(json.dumps(values, ensure_ascii=False), encoding='utf-8')
        return str(path)
    return _write


@pytest.fixture
def app_config(tmp_path):
    """An AppConfig pointing every path into tmp_path, with a small chunk size."""
    return AppConfig(
        project_root=str(tmp_path),
        chunk_size=2,
        chunk_output_dir=os.path.join(str(tmp_path), 'output_json'),
        default_input_csv=os.path.join(str(tmp_path), 'english.csv'),
        updated_csv_path=os.path.join(str(tmp_path), 'updated_english.csv'),
        log_file_path='',
        log_to_console=False,
    )
