"""
test_cli_scenarios.py - End-to-end CSV replay through the command line

Tests complete runs:
- Deposits and withdrawals with an insufficient-funds discard
- Dispute, chargeback and lock
- Whitespace, case and missing-column tolerance
- Fatal input aborts with no output
- Random stream generation feeding the replay
"""

import io
import logging

from dispute_ledger import LedgerEngine, read_transactions
from dispute_ledger import cli
from dispute_ledger.cli import main, generate_main


HEADER = "client,available,held,total,locked\n"


class TestReplayScenarios:

    def test_deposits_and_withdrawals(self, data_dir, capsys):
        assert main([str(data_dir / "scenario_a.csv")]) == 0
        assert capsys.readouterr().out == (
            HEADER
            + "1,1.5,0,1.5,false\n"
            + "2,2.0,0,2.0,false\n"
        )

    def test_chargeback_locks_account(self, data_dir, capsys):
        assert main([str(data_dir / "scenario_b.csv")]) == 0
        assert capsys.readouterr().out == HEADER + "1,0.0,0.0,0.0,true\n"

    def test_lenient_formatting(self, data_dir, capsys):
        assert main([str(data_dir / "spaced.csv")]) == 0
        assert capsys.readouterr().out == (
            HEADER
            + "3,10.0,0.0,10.0,false\n"
            + "1,4.00,0,4.00,false\n"
        )

    def test_sort_clients(self, data_dir, capsys):
        assert main([str(data_dir / "spaced.csv"), "--sort-clients"]) == 0
        rows = capsys.readouterr().out.splitlines()[1:]
        assert [row.split(",")[0] for row in rows] == ["1", "3"]

    def test_verbose_logs_discards(self, data_dir, capsys, caplog):
        with caplog.at_level(logging.INFO):
            assert main([str(data_dir / "scenario_a.csv"), "-v"]) == 0
        assert "REJECTED withdrawal tx=5 client=2" in caplog.text
        assert "REJECTED" not in capsys.readouterr().out


class TestFatalInput:

    def test_malformed_row_aborts(self, data_dir, capsys, caplog):
        with caplog.at_level(logging.ERROR):
            assert main([str(data_dir / "malformed.csv")]) == 1
        assert capsys.readouterr().out == ""
        assert "line 3" in caplog.text

    def test_invalid_utf8_aborts(self, tmp_path, capsys):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"type,client,tx,amount\ndeposit,1,1,\xff1.0\n")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_oversized_field_aborts(self, tmp_path, capsys):
        path = tmp_path / "huge.csv"
        path.write_text("type,client,tx,amount\ndeposit,1,1," + "9" * 200_000 + "\n", encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_empty_field_row_aborts(self, tmp_path, capsys):
        path = tmp_path / "commas.csv"
        path.write_text("type,client,tx,amount\ndeposit,1,1,1.0\n,,,\n", encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_abort_logged_under_module_logger(self, data_dir, caplog):
        with caplog.at_level(logging.ERROR, logger=cli.__name__):
            main([str(data_dir / "malformed.csv")])
        assert cli.logger.name == cli.__name__
        assert [r.name for r in caplog.records if r.levelno == logging.ERROR] == [cli.__name__]


class TestGenerate:

    def test_generate_writes_csv(self, capsys):
        assert generate_main(["5", "--seed", "7"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 6
        assert lines[0] == "type,client,tx,amount"

    def test_generate_is_reproducible(self, capsys):
        generate_main(["50", "--seed", "11", "--clients", "4"])
        first = capsys.readouterr().out
        generate_main(["50", "--seed", "11", "--clients", "4"])
        assert capsys.readouterr().out == first

    def test_generated_file_replays(self, tmp_path, capsys):
        generate_main(["500", "--seed", "3", "--clients", "5"])
        path = tmp_path / "generated.csv"
        path.write_text(capsys.readouterr().out, encoding="utf-8")

        assert main([str(path), "--sort-clients"]) == 0
        rows = capsys.readouterr().out.splitlines()
        assert rows[0] == HEADER.strip()
        assert 1 <= len(rows) - 1 <= 5

        engine = LedgerEngine("reference")
        engine.apply_all(read_transactions(io.StringIO(path.read_text(encoding="utf-8"))))
        assert len(rows) - 1 == len(engine.list_clients())
