"""
Split a multilingual CSV into per-language files, or merge a translated
language file back into the master CSV.

Usage:
    python -m src.csv_translator split <input.csv> <output_dir>
    python -m src.csv_translator merge <original.csv> <new_lang.csv> <output.csv>
"""
import argparse
import sys
from typing import List, Optional

from src.app_config import AppConfig
from src.cli_support import run_command, validate_paths
from src.column_tools import merge_files, split_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-translator",
        description="Split a multilingual CSV into per-language files or merge one back."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    split_parser = sub.add_parser("split", help="Write one Key/value CSV per language column")
    split_parser.add_argument("input_csv")
    split_parser.add_argument("output_dir")

    merge_parser = sub.add_parser("merge", help="Append a translated language column to the original CSV")
    merge_parser.add_argument("original_csv")
    merge_parser.add_argument("new_lang_csv")
    merge_parser.add_argument("output_csv")
    return parser


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    args = build_parser().parse_args(argv)

    def split(app_config: AppConfig) -> None:
        validate_paths(args.input_csv)
        split_file(args.input_csv, args.output_dir, app_config.reserved_columns)

    def merge(app_config: AppConfig) -> None:
        validate_paths(args.original_csv, args.new_lang_csv)
        merge_files(args.original_csv, args.new_lang_csv, args.output_csv)

    return run_command(split if args.cmd == "split" else merge, config)


if __name__ == "__main__":
    sys.exit(main())
