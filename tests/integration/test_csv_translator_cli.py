"""
Integration tests for the `csv_translator` split/merge commands.

The commands run in-process through `main()` with an explicit AppConfig so
no config.yaml or log file is touched.
"""
import json
import os

import pytest

from src.csv_translator import main
from src.row_store import load_row_store


MASTER_HEADER = ['Key', 'English', 'French', 'Comments', 'Timestamp']
MASTER_ROWS = [
    ['menu.start', 'Start {player}', 'Démarrer {player}', 'title screen', '2024-01-01'],
    ['menu.quit', 'Quit', 'Quitter', '', '2024-01-01'],
    ['', 'orphan row', 'ligne orpheline', '', ''],
    ['shop.price', 'Costs $5, "cheap"', 'Coûte $5, "pas cher"', 'shop', '2024-01-02'],
]


class TestSplitCommand:

    def test_split_writes_language_files(self, app_config, write_csv, read_csv, tmp_path):
        input_csv = write_csv('master.csv', MASTER_HEADER, MASTER_ROWS)
        out_dir = str(tmp_path / 'split')

        status = main(['split', input_csv, out_dir], config=app_config)

        assert status == 0
        assert sorted(os.listdir(out_dir)) == ['english.csv', 'french.csv', 'original_headers.json']
        header, rows = read_csv(os.path.join(out_dir, 'french.csv'))
        assert header == ['Key', 'French']
        assert rows == [
            ['menu.start', 'Démarrer {player}'],
            ['menu.quit', 'Quitter'],
            ['shop.price', 'Coûte $5, "pas cher"'],
        ]
        with open(os.path.join(out_dir, 'original_headers.json'), encoding='utf-8') as f:
            assert json.load(f) == MASTER_HEADER

    def test_split_missing_input(self, app_config, tmp_path, caplog):
        out_dir = tmp_path / 'split'

        status = main(['split', str(tmp_path / 'absent.csv'), str(out_dir)], config=app_config)

        assert status == 1
        assert "not found" in caplog.text
        assert not out_dir.exists()

    def test_split_input_without_keys(self, app_config, write_csv, tmp_path, caplog):
        input_csv = write_csv('master.csv', ['Key', 'English'], [['', 'no key']])

        status = main(['split', input_csv, str(tmp_path / 'split')], config=app_config)

        assert status == 1
        assert "no rows with a non-empty Key" in caplog.text

    def test_usage_error_exits_with_argparse_status(self, app_config):
        with pytest.raises(SystemExit) as excinfo:
            main(['split', 'only-one-arg.csv'], config=app_config)

        assert excinfo.value.code == 2


class TestMergeCommand:

    def test_merge_appends_column_and_logs_diagnostics(self, app_config, write_csv, read_csv, tmp_path, caplog):
        original = write_csv('master.csv', ['Key', 'English'], [
            ['a', 'A'], ['a', 'A2'], ['b', 'B'], ['c', 'C'],
        ])
        new_lang = write_csv('german.csv', ['Key', 'German'], [
            ['a', 'Ah'], ['a', 'Ah2'], ['b', 'Beh'], ['d', 'Deh'],
        ])
        output = str(tmp_path / 'out' / 'merged.csv')

        with caplog.at_level('INFO'):
            status = main(['merge', original, new_lang, output], config=app_config)

        assert status == 0
        header, rows = read_csv(output)
        assert header == ['Key', 'English', 'German']
        assert rows == [['a', 'A', 'Ah'], ['a', 'A2', 'Ah2'], ['b', 'B', 'Beh'], ['c', 'C', 'Deh']]
        assert "duplicates: Yes (1 extra rows from 1 keys)" in caplog.text
        assert "Duplicate examples: a: 2 times" in caplog.text
        assert "Matching unique Keys: 2" in caplog.text
        assert "Missing Keys: c" in caplog.text
        assert "Ignored Keys: d" in caplog.text
        assert "Output headers: Key, English, German" in caplog.text

    def test_merge_rejects_wide_language_file(self, app_config, write_csv, tmp_path, caplog):
        original = write_csv('master.csv', ['Key', 'English'], [['a', 'A']])
        new_lang = write_csv('bad.csv', ['Key', 'German', 'French'], [['a', 'Ah', 'Ah']])
        output = tmp_path / 'merged.csv'

        with caplog.at_level('INFO'):
            status = main(['merge', original, new_lang, str(output)], config=app_config)

        assert status == 1
        assert "exactly two columns" in caplog.text
        assert "Matching unique Keys: 1" in caplog.text
        assert not output.exists()

    def test_merge_missing_language_file(self, app_config, write_csv, tmp_path, caplog):
        original = write_csv('master.csv', ['Key', 'English'], [['a', 'A']])
        output = tmp_path / 'merged.csv'

        status = main(['merge', original, str(tmp_path / 'absent.csv'), str(output)], config=app_config)

        assert status == 1
        assert "absent.csv' not found" in caplog.text
        assert not output.exists()

    def test_split_then_merge_reproduces_each_column(self, app_config, write_csv, tmp_path):
        input_csv = write_csv('master.csv', MASTER_HEADER, MASTER_ROWS)
        split_dir = str(tmp_path / 'split')
        assert main(['split', input_csv, split_dir], config=app_config) == 0

        original = load_row_store(input_csv)
        for language in ('English', 'French'):
            base_header = [column for column in MASTER_HEADER if column != language]
            base_csv = write_csv(f'base_{language}.csv', base_header, [
                [row.get(column, '') for column in base_header] for row in original.rows
            ])
            output = str(tmp_path / f'merged_{language}.csv')

            status = main(['merge', base_csv, os.path.join(split_dir, f'{language.lower()}.csv'), output],
                          config=app_config)

            assert status == 0
            merged = load_row_store(output)
            assert merged.header[-1] == language
            assert merged.column_values(language) == original.column_values(language)
