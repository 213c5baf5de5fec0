import json
import logging
import math
import os
import re
from typing import List, Optional, Sequence, Tuple

import jsonschema

from src.app_config import DEFAULT_CHUNK_SIZE
from src.errors import InvalidFilenameError, ParseError
from src.logging_config import LOGGER_NAME

CHUNK_FILENAME_PATTERN = re.compile(r'data_([1-9]\d*)\.json')

# Chunk files must hold a flat list of strings, one per row
CHUNK_SCHEMA = {
    "type": "array",
    "items": {"type": "string"}
}

# Stand-in for blank cells so every exported unit is a non-empty string
EMPTY_VALUE_PLACEHOLDER = " "

logger = logging.getLogger(LOGGER_NAME)


def chunk_filename(chunk_index: int) -> str:
    return f"data_{chunk_index}.json"


def parse_chunk_index(file_path: str) -> int:
    """
    Extract the 1-based chunk index from a chunk file name.

    Raises:
        InvalidFilenameError: If the name is not data_<positive integer>.json.
    """
    file_name = os.path.basename(file_path)
    match = CHUNK_FILENAME_PATTERN.fullmatch(file_name)
    if not match:
        raise InvalidFilenameError(
            f"Invalid chunk file name '{file_name}': expected data_<N>.json with N starting at 1."
        )
    return int(match.group(1))


class ChunkCodec:
    """
    Serializes a column of values into fixed-size JSON chunk files and reads them back.

    Chunk i covers rows [(i - 1) * chunk_size, i * chunk_size). Reassembly relies
    on the chunk size being the same at export and import time.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self.chunk_size = chunk_size

    def chunk_offset(self, chunk_index: int) -> int:
        return (chunk_index - 1) * self.chunk_size

    def expected_chunk_length(self, chunk_index: int, total_rows: int) -> int:
        """Number of values chunk `chunk_index` must hold for a table of `total_rows` rows."""
        return min(self.chunk_size, total_rows - self.chunk_offset(chunk_index))

    def export_chunks(self, values: Sequence[Optional[str]], output_dir: str) -> List[str]:
        """
        Write values to data_1.json .. data_<ceil(n / chunk_size)>.json.

        Empty values are written as a single space. No token validation
        happens here; that is done when translations come back.

        Args:
            values: The column values, in row order.
            output_dir: Folder receiving the chunk files; created when missing.

        Returns:
            List[str]: The chunk file paths in index order.
        """
        os.makedirs(output_dir, exist_ok=True)
        exported = [value if value else EMPTY_VALUE_PLACEHOLDER for value in values]

        paths = []
        chunk_count = math.ceil(len(exported) / self.chunk_size)
        for chunk_index in range(1, chunk_count + 1):
            start = self.chunk_offset(chunk_index)
            chunk = exported[start:start + self.chunk_size]
            chunk_path = os.path.join(output_dir, chunk_filename(chunk_index))
            with open(chunk_path, 'w', encoding='utf-8') as f:
                json.dump(chunk, f, ensure_ascii=False, separators=(',', ':'))
            paths.append(chunk_path)

        logger.info("Exported %d value(s) into %d chunk file(s) in '%s'.", len(exported), chunk_count, output_dir)
        return paths

    def import_chunk(self, chunk_path: str) -> Tuple[int, List[str]]:
        """
        Read one chunk file.

        Returns:
            Tuple[int, List[str]]: The chunk index parsed from the file name and its values.

        Raises:
            InvalidFilenameError: If the file name does not carry a chunk index.
            ParseError: If the file is not a JSON array of strings.
        """
        chunk_index = parse_chunk_index(chunk_path)
        try:
            with open(chunk_path, 'r', encoding='utf-8-sig') as f:
                values = json.load(f)
        except UnicodeDecodeError as e:
            raise ParseError(f"not a valid UTF-8 file ({e.reason})", path=chunk_path) from e
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON: {e}", path=chunk_path) from e

        try:
            jsonschema.validate(instance=values, schema=CHUNK_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ParseError(f"chunk must be a JSON array of strings: {e.message}", path=chunk_path) from e

        return chunk_index, values

    def import_all(self, chunk_dir: str) -> List[str]:
        """
        Read every chunk file in a folder and concatenate them by ascending index.

        Files that are not named data_<N>.json are skipped.
        """
        indexed_paths = []
        for file_name in os.listdir(chunk_dir):
            file_path = os.path.join(chunk_dir, file_name)
            if not os.path.isfile(file_path):
                continue
            try:
                indexed_paths.append((parse_chunk_index(file_name), file_path))
            except InvalidFilenameError:
                logger.warning("Skipping '%s': not a chunk file.", file_path)

        indexed_paths.sort()

        indices = [chunk_index for chunk_index, _ in indexed_paths]
        missing = sorted(set(range(1, max(indices, default=0) + 1)) - set(indices))
        if missing:
            logger.warning("Chunk file(s) missing from '%s': %s",
                           chunk_dir, ", ".join(chunk_filename(index) for index in missing))

        all_values: List[str] = []
        for _, file_path in indexed_paths:
            _, values = self.import_chunk(file_path)
            all_values.extend(values)

        logger.info("Read %d value(s) from %d chunk file(s) in '%s'.", len(all_values), len(indexed_paths), chunk_dir)
        return all_values
