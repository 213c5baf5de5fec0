import logging
from dataclasses import dataclass
from typing import Set

from src.logging_config import LOGGER_NAME
from src.row_store import KeySet

DUPLICATE_EXAMPLE_LIMIT = 3

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class Reconciliation:
    """Unique-key comparison between a primary table and a secondary table."""
    matching: Set[str]
    missing_in_secondary: Set[str]
    extra_in_secondary: Set[str]

    def is_consistent(self, primary: KeySet) -> bool:
        return len(self.matching) == len(primary) - len(self.missing_in_secondary)


def reconcile(primary: KeySet, secondary: KeySet) -> Reconciliation:
    """
    Compares the unique keys of a secondary table against a primary table.

    Args:
        primary: Keys of the table being extended.
        secondary: Keys of the table supplying the new values.

    Returns:
        A Reconciliation holding three sets:
        - matching: keys present on both sides.
        - missing_in_secondary: keys present in primary but absent from secondary.
        - extra_in_secondary: keys present in secondary but absent from primary.
    """
    primary_keys = primary.keys
    secondary_keys = secondary.keys
    return Reconciliation(
        matching=primary_keys & secondary_keys,
        missing_in_secondary=primary_keys - secondary_keys,
        extra_in_secondary=secondary_keys - primary_keys,
    )


def _ordered(keys: Set[str], key_set: KeySet) -> list:
    """Keys in the order they first appeared in the table they came from."""
    return [key for key in key_set.counts if key in keys]


def log_key_set_summary(label: str, row_count: int, key_set: KeySet) -> None:
    """Log row and unique key counts plus the first few duplicated keys."""
    logger.info("- %s has %d rows with non-empty Key.", label, row_count)
    duplicates = key_set.duplicates
    if duplicates:
        duplicate_summary = f"Yes ({key_set.extra_rows} extra rows from {len(duplicates)} keys)"
    else:
        duplicate_summary = "No"
    logger.info("- %s unique Keys: %d (duplicates: %s)", label, len(key_set), duplicate_summary)
    if duplicates:
        examples = [f"{key}: {count} times" for key, count in list(duplicates.items())[:DUPLICATE_EXAMPLE_LIMIT]]
        logger.info("  Duplicate examples: %s", ", ".join(examples))


def log_reconciliation(report: Reconciliation, primary: KeySet, secondary: KeySet) -> None:
    """
    Log the outcome of a reconciliation. Advisory only: nothing here raises.
    """
    logger.info("- Matching unique Keys: %d", len(report.matching))

    if report.missing_in_secondary:
        logger.info("- Unique Keys in original but missing in new lang (filled with empty): %d",
                    len(report.missing_in_secondary))
        logger.info("  Missing Keys: %s", ", ".join(_ordered(report.missing_in_secondary, primary)))
    else:
        logger.info("- Unique Keys in original but missing in new lang: 0")

    if report.extra_in_secondary:
        logger.info("- Unique Keys in new lang but not in original (ignored): %d",
                    len(report.extra_in_secondary))
        logger.info("  Ignored Keys: %s", ", ".join(_ordered(report.extra_in_secondary, secondary)))
    else:
        logger.info("- Unique Keys in new lang but not in original: 0")

    if not report.is_consistent(primary):
        expected = len(primary) - len(report.missing_in_secondary)
        logger.warning("Expected %d matching unique Keys, but found %d. Data inconsistency.",
                       expected, len(report.matching))
