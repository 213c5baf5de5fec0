import csv
import logging
import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.errors import EmptyInputError, ParseError
from src.logging_config import LOGGER_NAME

KEY_COLUMN = 'Key'

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class KeySet:
    """Distinct trimmed keys of a table together with how often each occurs."""
    counts: Dict[str, int]

    @property
    def keys(self) -> set:
        return set(self.counts)

    @property
    def duplicates(self) -> Dict[str, int]:
        return {key: count for key, count in self.counts.items() if count > 1}

    @property
    def extra_rows(self) -> int:
        """Number of rows beyond the first occurrence of each duplicated key."""
        return sum(count - 1 for count in self.duplicates.values())

    def __len__(self) -> int:
        return len(self.counts)


@dataclass
class RowStore:
    """
    An ordered, in-memory table loaded from a CSV file.

    Rows are dictionaries keyed by column name. Duplicate keys are kept in
    their original order and are told apart only by position.
    """
    header: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def key_set(self) -> KeySet:
        # Counter keeps first-seen order, which is the order diagnostics report keys in
        return KeySet(counts=dict(Counter(row.get(KEY_COLUMN, '').strip() for row in self.rows)))

    def column_values(self, column: str, default: str = '') -> List[str]:
        return [row.get(column) or default for row in self.rows]

    def copy(self) -> 'RowStore':
        return RowStore(header=list(self.header), rows=[dict(row) for row in self.rows])


def has_key(row: Dict[str, Optional[str]]) -> bool:
    """True when the row carries a Key that is not blank after trimming."""
    key = row.get(KEY_COLUMN)
    return bool(key and key.strip())


def load_row_store(file_path: str) -> RowStore:
    """
    Parse a CSV file into a RowStore.

    Only rows with a non-empty Key are kept; the number of dropped rows is
    logged as a warning. Cells missing from a short row are read as ''.

    Args:
        file_path (str): The path to the CSV file.

    Returns:
        RowStore: The header and the retained rows.

    Raises:
        ParseError: If the file is not valid UTF-8 CSV.
        EmptyInputError: If no row has a non-empty Key.
    """
    rows = []
    keyless_rows = 0
    try:
        # utf-8-sig strips the BOM spreadsheet exports like to prepend
        with open(file_path, 'r', encoding='utf-8-sig', newline='') as csv_file:
            reader = csv.DictReader(csv_file, restval='', strict=True)
            header = reader.fieldnames
            if not header:
                raise ParseError("file has no header row", path=file_path)
            for row in reader:
                if None in row:
                    raise ParseError(
                        f"line {reader.line_num} has more fields than the header ({len(header)})",
                        path=file_path
                    )
                if has_key(row):
                    rows.append(dict(row))
                else:
                    keyless_rows += 1
    except UnicodeDecodeError as e:
        raise ParseError(f"not a valid UTF-8 file ({e.reason})", path=file_path) from e
    except csv.Error as e:
        raise ParseError(f"malformed CSV: {e}", path=file_path) from e

    if keyless_rows:
        logger.warning("Dropped %d row(s) without a %s from '%s'.", keyless_rows, KEY_COLUMN, file_path)
    if not rows:
        raise EmptyInputError(f"no rows with a non-empty {KEY_COLUMN}", path=file_path)

    logger.debug("Loaded %d row(s) with columns %s from '%s'.", len(rows), header, file_path)
    return RowStore(header=list(header), rows=rows)


def save_row_store(file_path: str, store: RowStore) -> None:
    """
    Write a RowStore to a CSV file using the store's header order.

    Args:
        file_path (str): Destination path; parent directories are created.
        store (RowStore): The table to write.
    """
    output_dir = os.path.dirname(file_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(file_path, 'w', encoding='utf-8', newline='') as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(store.header)
        for row in store.rows:
            writer.writerow([row.get(column, '') for column in store.header])

    logger.debug("Wrote %d row(s) to '%s'.", len(store.rows), file_path)
