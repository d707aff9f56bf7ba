from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from ofx2csv.convert import convert_file
from ofx2csv.errors import AmountParseFailure, SourceUnavailable
from ofx2csv.models import LAYOUTS
from ofx2csv.pipeline import main


SAMPLE_OFX = Path(__file__).resolve().parents[1] / "samples" / "extrato_sample.ofx"


@pytest.fixture
def sample(tmp_path) -> Path:
    dst = tmp_path / "extrato.ofx"
    shutil.copy(SAMPLE_OFX, dst)
    return dst


def test_convert_sample_memo_layout(sample):
    conversion = convert_file(sample, LAYOUTS["memo"])

    assert conversion.out_path == sample.with_suffix(".csv")
    assert conversion.out_path.read_text(encoding="utf-8").splitlines() == [
        "Type;Date;Amount;ID;Name;Memo",
        "DEBIT;2023-06-05 08:30:00;-120.75;202306050001;Supermercado Central;Compra com cartao",
        "CREDIT;2023-06-10;2500.00;202306100002;Salario;",
        "DEBIT;2023-06-15 12:00:00;-45.50;202306150003;Farmacia;",
    ]


def test_convert_sample_account_layout(sample, tmp_path):
    out = tmp_path / "custom.csv"
    conversion = convert_file(sample, LAYOUTS["account"], out_path=out)

    assert conversion.out_path == out
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[:8] == [
        "Bank ID: 0341",
        "Account ID: 12345-6",
        "Account Type: CHECKING",
        "Start Date: 2023-06-01",
        "End Date: 2023-06-30",
        "Balance: 2333.75",
        "Date As Of: 2023-06-30",
        "",
    ]
    assert lines[8] == "Type,Date,Amount,ID,Name"
    assert len(lines) == 9 + 3


def test_convert_is_idempotent(sample):
    first = convert_file(sample).out_path.read_bytes()
    second = convert_file(sample).out_path.read_bytes()
    assert first == second


def test_convert_cp1252_input(tmp_path):
    src = tmp_path / "latin.ofx"
    src.write_bytes("<STMTTRN>\n<NAME>Paçoca José\n</STMTTRN>\n".encode("cp1252"))

    conversion = convert_file(src)
    assert conversion.result.transactions[0].name == "Paçoca José"
    assert "Paçoca José" in conversion.out_path.read_text(encoding="utf-8")


def test_convert_without_transactions_writes_nothing(tmp_path):
    src = tmp_path / "empty.ofx"
    src.write_text("<OFX>\n<BANKID>1\n</OFX>\n", encoding="utf-8")

    conversion = convert_file(src, LAYOUTS["account"])
    assert conversion.out_path is None
    assert conversion.result.transactions == []
    assert not (tmp_path / "empty.csv").exists()


def test_convert_missing_source(tmp_path):
    with pytest.raises(SourceUnavailable):
        convert_file(tmp_path / "missing.ofx")
    assert not (tmp_path / "missing.csv").exists()


def test_convert_bad_amount_leaves_no_output(tmp_path):
    src = tmp_path / "bad.ofx"
    src.write_text("<STMTTRN>\n<TRNAMT>1,50\n</STMTTRN>\n", encoding="utf-8")

    with pytest.raises(AmountParseFailure):
        convert_file(src)
    assert not (tmp_path / "bad.csv").exists()


def test_cli_ok(sample, capsys):
    assert main([str(sample), "--layout", "account", "--memo", "--delimiter", ";"]) == 0

    lines = sample.with_suffix(".csv").read_text(encoding="utf-8").splitlines()
    assert lines[8] == "Type;Date;Amount;ID;Name;Memo"
    assert "Transactions saved to CSV" in capsys.readouterr().out


def test_cli_date_style_and_out(sample, tmp_path):
    out = tmp_path / "x.csv"
    assert main([str(sample), "--date-style", "dmy", "--out", str(out)]) == 0
    assert out.read_text(encoding="utf-8").splitlines()[1].split(";")[1] == "05/06/2023 08:30:00"


def test_cli_no_transactions(tmp_path, capsys):
    src = tmp_path / "empty.ofx"
    src.write_text("<OFX>\n</OFX>\n", encoding="utf-8")

    assert main([str(src)]) == 0
    assert "No transactions found" in capsys.readouterr().out


def test_cli_malformed_exits_1(tmp_path, capsys):
    src = tmp_path / "broken.ofx"
    src.write_text("<FITID>1\n", encoding="utf-8")

    assert main([str(src)]) == 1
    assert "ERROR" in capsys.readouterr().out


def test_cli_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "nope.ofx")])
    assert "No existe el archivo" in str(exc.value.code)


def test_cli_table_follows_layout_columns(sample, capsys):
    assert main([str(sample), "--no-memo"]) == 0

    out = capsys.readouterr().out
    assert "Memo" not in out
    assert "Compra com cartao" not in out
    assert sample.with_suffix(".csv").read_text(encoding="utf-8").splitlines()[0] == "Type;Date;Amount;ID;Name"
