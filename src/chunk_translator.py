"""
Export the English column of a CSV to chunked JSON files and write
translated chunks back after validating their tokens.

Usage:
    python -m src.chunk_translator extract <input.csv>
    python -m src.chunk_translator update <chunk.json>
    python -m src.chunk_translator update-all <input.csv>

`update` always reads the configured default input CSV (english.csv), and
both update commands write to the configured output CSV
(updated_english.csv), replacing any earlier output.
"""
import argparse
import sys
from typing import List, Optional

from src.app_config import AppConfig
from src.cli_support import run_command, validate_paths
from src.row_store import load_row_store
from src.translation_applier import TranslationApplier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunk-translator",
        description="Export a CSV column to JSON chunks and apply translated chunks back."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    extract_parser = sub.add_parser("extract", help="Write the text column to data_<N>.json chunk files")
    extract_parser.add_argument("input_csv")

    update_parser = sub.add_parser("update", help="Apply one translated chunk to the default input CSV")
    update_parser.add_argument("chunk_json")

    update_all_parser = sub.add_parser("update-all", help="Apply every translated chunk to the given CSV")
    update_all_parser.add_argument("input_csv")
    return parser


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    args = build_parser().parse_args(argv)

    def extract(app_config: AppConfig) -> None:
        validate_paths(args.input_csv)
        store = load_row_store(args.input_csv)
        TranslationApplier(app_config).export_column(store, app_config.chunk_output_dir)

    def update(app_config: AppConfig) -> None:
        validate_paths(app_config.default_input_csv, args.chunk_json)
        store = load_row_store(app_config.default_input_csv)
        TranslationApplier(app_config).apply_chunk(store, args.chunk_json)

    def update_all(app_config: AppConfig) -> None:
        validate_paths(args.input_csv)
        store = load_row_store(args.input_csv)
        TranslationApplier(app_config).apply_all(store, app_config.chunk_output_dir)

    commands = {"extract": extract, "update": update, "update-all": update_all}
    return run_command(commands[args.cmd], config)


if __name__ == "__main__":
    sys.exit(main())
