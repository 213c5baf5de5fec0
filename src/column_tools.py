"""
Split a multilingual CSV into per-language files and merge a translated
language file back in.
"""
import json
import logging
import os
import re
from typing import Iterable, List

from tqdm import tqdm

from src.app_config import DEFAULT_RESERVED_COLUMNS
from src.errors import EmptyInputError, SchemaError
from src.key_reconciler import log_key_set_summary, log_reconciliation, reconcile
from src.logging_config import LOGGER_NAME
from src.row_store import KEY_COLUMN, RowStore, load_row_store, save_row_store

HEADERS_FILENAME = 'original_headers.json'

logger = logging.getLogger(LOGGER_NAME)


def file_safe_name(column: str) -> str:
    """
    Derive a file name stem from a column header.

    Args:
        column (str): The column header, e.g. 'Portuguese (Brazil)'.

    Returns:
        str: Lowercased header with every character outside [a-z0-9] replaced by '-'.
    """
    return re.sub(r'[^a-z0-9]', '-', column.lower())


def split_columns(store: RowStore, output_dir: str,
                  reserved_columns: Iterable[str] = DEFAULT_RESERVED_COLUMNS) -> List[str]:
    """
    Write one Key/value CSV per language column of the store.

    The full header list is saved next to the language files as
    original_headers.json.

    Args:
        store (RowStore): The master table.
        output_dir (str): Folder receiving the files; created when missing.
        reserved_columns (Iterable[str]): Columns that are not languages.

    Returns:
        List[str]: Paths of the language files, in header order.
    """
    if not store.rows:
        raise EmptyInputError("No valid data (with non-empty Key) in input file.")

    os.makedirs(output_dir, exist_ok=True)

    with open(os.path.join(output_dir, HEADERS_FILENAME), 'w', encoding='utf-8') as f:
        json.dump(store.header, f, ensure_ascii=False, separators=(',', ':'))

    reserved = set(reserved_columns)
    language_columns = [column for column in store.header if column not in reserved]

    written = {}
    for column in tqdm(language_columns, desc="Splitting columns", unit="file", disable=None):
        file_name = file_safe_name(column) + '.csv'
        if file_name in written:
            logger.warning("Columns '%s' and '%s' both map to %s; the later one overwrites it.",
                           written[file_name], column, file_name)
        output_path = os.path.join(output_dir, file_name)
        language_store = RowStore(
            header=[KEY_COLUMN, column],
            rows=[{KEY_COLUMN: row[KEY_COLUMN], column: row.get(column) or ''} for row in store.rows]
        )
        save_row_store(output_path, language_store)
        written[file_name] = column
        logger.info("Created: %s (columns: %s, %s, rows: %d)", file_name, KEY_COLUMN, column, len(language_store))

    logger.info("Split completed. Processed %d rows with non-empty Key.", len(store.rows))
    return [os.path.join(output_dir, file_name) for file_name in written]


def merge_column(primary: RowStore, secondary: RowStore) -> RowStore:
    """
    Append the value column of a two-column language table to the primary table.

    Values are aligned by row position, not by key: row i of the primary
    receives row i of the secondary, or an empty string when the secondary
    is shorter. This keeps distinct values for duplicated keys, but a
    secondary file whose rows were reordered pairs values with the wrong rows.
    Key reconciliation is only logged.

    Args:
        primary (RowStore): The master table. It is not modified.
        secondary (RowStore): A table with exactly the columns Key and <language>.

    Returns:
        RowStore: A new table with the language column appended.
    """
    if not primary.rows:
        raise EmptyInputError("No valid data (with non-empty Key) in original file.")
    if not secondary.rows:
        raise EmptyInputError("No valid data (with non-empty Key) in new lang file.")

    primary_keys = primary.key_set()
    secondary_keys = secondary.key_set()
    log_key_set_summary("Original file", len(primary.rows), primary_keys)
    log_key_set_summary("New lang file", len(secondary.rows), secondary_keys)
    log_reconciliation(reconcile(primary_keys, secondary_keys), primary_keys, secondary_keys)

    if len(secondary.header) != 2 or secondary.header[0] != KEY_COLUMN:
        raise SchemaError(
            "New lang file must have exactly two columns: Key and the language value. "
            f"Found: {', '.join(secondary.header)}"
        )

    language_column = secondary.header[1]
    logger.info("- Detected language name: %s", language_column)

    new_values = secondary.column_values(language_column)
    merged = primary.copy()
    for index, row in enumerate(merged.rows):
        row[language_column] = new_values[index] if index < len(new_values) else ''
    merged.header.append(language_column)

    if merged.header.count(language_column) > 1:
        logger.warning("Column '%s' already exists in the original file; it now appears %d times.",
                       language_column, merged.header.count(language_column))

    logger.info("Added column '%s'.", language_column)
    logger.info("- Total rows in output: %d (duplicate keys keep their order-based values)", len(merged.rows))
    logger.info("- Output headers: %s", ", ".join(merged.header))
    return merged


def merge_files(original_path: str, new_lang_path: str, output_path: str) -> RowStore:
    """Load both tables, merge the language column, and write the result."""
    logger.info("Starting merge process...")
    logger.info("- Original file: %s", original_path)
    logger.info("- New language file: %s", new_lang_path)
    logger.info("- Output file: %s", output_path)

    primary = load_row_store(original_path)
    secondary = load_row_store(new_lang_path)
    merged = merge_column(primary, secondary)
    save_row_store(output_path, merged)
    logger.info("Merge completed: wrote %s.", output_path)
    return merged


def split_file(input_path: str, output_dir: str,
               reserved_columns: Iterable[str] = DEFAULT_RESERVED_COLUMNS) -> List[str]:
    """Load a master table and split it into per-language files."""
    return split_columns(load_row_store(input_path), output_dir, reserved_columns)
