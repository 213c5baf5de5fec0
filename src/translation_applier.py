"""
Apply translated chunk files back onto the text column of a CSV table.

Every write path validates the whole batch before touching a single row:
either all translated values are applied and the table is saved, or an
error is raised and nothing is written.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tqdm import tqdm

from src.app_config import AppConfig
from src.chunk_codec import ChunkCodec
from src.errors import LengthMismatchError, SchemaError, TokenMismatchError
from src.logging_config import LOGGER_NAME
from src.row_store import KEY_COLUMN, RowStore, save_row_store
from src.translation_validator import Mismatch, compare

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class RowMismatch:
    """All token mismatches found for one row."""
    row_number: int
    key: str
    mismatches: List[Mismatch]

    def describe(self) -> str:
        prefix = f'Row {self.row_number} (Key "{self.key}"):'
        return "\n".join(f"{prefix} {mismatch.describe()}" for mismatch in self.mismatches)


class TranslationApplier:
    """Exports the text column to chunks and writes validated translations back."""

    def __init__(self, config: AppConfig, codec: Optional[ChunkCodec] = None):
        self.config = config
        self.codec = codec or ChunkCodec(config.chunk_size)
        self.text_column = config.text_column
        self.output_path = config.updated_csv_path

    def _require_text_column(self, store: RowStore) -> None:
        if self.text_column not in store.header:
            raise SchemaError(
                f"Column '{self.text_column}' not found. Available columns: {', '.join(store.header)}"
            )

    def export_column(self, store: RowStore, output_dir: str) -> List[str]:
        """Write the text column of `store` to chunk files in `output_dir`."""
        self._require_text_column(store)
        return self.codec.export_chunks(store.column_values(self.text_column), output_dir)

    def validate_batch(self, store: RowStore, translations: Sequence[str], offset: int = 0) -> List[RowMismatch]:
        """
        Compare each translation with the original value at the same position.

        Args:
            store: The table holding the original values.
            translations: Translated values; translations[j] belongs to row offset + j.
            offset: Index of the first row the batch covers.

        Returns:
            List[RowMismatch]: One entry per failing row, in row order.
        """
        failures = []
        pairs = enumerate(translations)
        for j, translated in tqdm(pairs, total=len(translations), desc="Validating", unit="row", disable=None):
            index = offset + j
            row = store.rows[index]
            mismatches = compare(row.get(self.text_column) or '', translated)
            if mismatches:
                failures.append(RowMismatch(row_number=index + 1, key=row.get(KEY_COLUMN, ''), mismatches=mismatches))
        return failures

    def _apply(self, store: RowStore, translations: Sequence[str], offset: int) -> RowStore:
        failures = self.validate_batch(store, translations, offset)
        if failures:
            raise TokenMismatchError(failures)

        for j, translated in enumerate(translations):
            store.rows[offset + j][self.text_column] = translated

        save_row_store(self.output_path, store)
        return store

    def apply_chunk(self, store: RowStore, chunk_path: str) -> RowStore:
        """
        Validate one translated chunk and write it into its slice of the table.

        The chunk index in the file name determines which rows it covers.

        Raises:
            LengthMismatchError: If the chunk does not hold exactly the expected number of values.
            TokenMismatchError: If any translated value fails token validation.
        """
        self._require_text_column(store)
        chunk_index, translations = self.codec.import_chunk(chunk_path)
        offset = self.codec.chunk_offset(chunk_index)
        expected = self.codec.expected_chunk_length(chunk_index, len(store.rows))

        # A chunk starting past the last row covers nothing and is rejected too
        if expected <= 0 or len(translations) != expected:
            raise LengthMismatchError(
                f"Chunk length ({len(translations)}) does not match expected ({max(expected, 0)}) "
                f"for chunk {chunk_index} of a table with {len(store.rows)} rows.",
                expected=max(expected, 0),
                actual=len(translations),
            )

        self._apply(store, translations, offset)
        logger.info("Chunk %d applied (%d rows) and saved as %s", chunk_index, len(translations), self.output_path)
        return store

    def apply_all(self, store: RowStore, chunk_dir: str) -> RowStore:
        """
        Validate every chunk in `chunk_dir` and write them over the whole table.

        Raises:
            LengthMismatchError: If the chunks together do not cover every row exactly once.
            TokenMismatchError: If any translated value fails token validation.
        """
        self._require_text_column(store)
        translations = self.codec.import_all(chunk_dir)

        if len(translations) != len(store.rows):
            raise LengthMismatchError(
                f"Number of rows in CSV ({len(store.rows)}) differs from total items in JSON ({len(translations)}).",
                expected=len(store.rows),
                actual=len(translations),
            )

        self._apply(store, translations, 0)
        logger.info("All translations merged (%d rows) and saved as %s", len(translations), self.output_path)
        return store
