"""
tests/test_main.py

End-to-end run of the command line pipeline.
Requires 'pytest' to run.
"""
import os
import csv
import tempfile
import shutil
import main


def test_cli_writes_both_exports():
    temp_dir = tempfile.mkdtemp()
    try:
        source = os.path.join(temp_dir, "tickets.csv")
        with open(source, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(["Hall Ticket"])
            for code in ("01", "05"):
                for n in range(1, 13):
                    writer.writerow([f"259F1A{code}{n:02d}"])

        out_dir = os.path.join(temp_dir, "out")
        code = main.main([
            source,
            "--students-per-room", "12", "--rows", "3", "--cols", "4",
            "--config", os.path.join(temp_dir, "none.csv"),
            "--branch-codes", os.path.join(temp_dir, "none.csv"),
            "--output-dir", out_dir,
        ])
        assert code == 0
        assert os.path.exists(os.path.join(out_dir, main.EXCEL_FILE_NAME))
        assert os.path.exists(os.path.join(out_dir, main.PDF_FILE_NAME))
    finally:
        shutil.rmtree(temp_dir)


def test_cli_rejects_bad_settings(capsys):
    assert main.main(["missing.xlsx", "--rows", "0", "--config", "none.csv"]) == 1
    assert "Invalid settings" in capsys.readouterr().out


def test_cli_reports_unreadable_input():
    assert main.main(["does-not-exist.xlsx", "--config", "none.csv", "--branch-codes", "none.csv"]) == 1
