from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Union

from .errors import SinkUnavailable
from .models import AccountDetails, CsvLayout, ParseResult, Transaction, format_amount


logger = logging.getLogger(__name__)


def csv_path_for(ofx_path: Union[str, Path]) -> Path:
    """`extrato.ofx` -> `extrato.csv`; sin sufijo `.ofx` (exacto) se agrega `.csv`."""
    s = str(ofx_path)
    if s.endswith(".ofx"):
        return Path(s[: -len(".ofx")] + ".csv")
    return Path(s + ".csv")


def header(layout: CsvLayout) -> str:
    return layout.delimiter.join(layout.columns)


def account_lines(account: AccountDetails) -> List[str]:
    lines = [f"{label}: {value}" for label, value in account.labeled()]
    lines.append("")
    return lines


def transaction_row(tx: Transaction, layout: CsvLayout) -> str:
    fields = [tx.type, tx.date, format_amount(tx.amount), tx.id, tx.name or ""]
    if layout.include_memo:
        fields.append(tx.memo or "")

    # Sin comillas ni escape: la fila queda corrupta, solo se avisa
    bad = [f for f in fields if layout.delimiter in f]
    if bad:
        logger.warning(
            "transaction %r: field(s) %r contain the delimiter %r, row will be misaligned",
            tx.id,
            bad,
            layout.delimiter,
        )
    return layout.delimiter.join(fields)


def render_csv(result: ParseResult, layout: CsvLayout) -> List[str]:
    out: List[str] = []
    if layout.include_account and result.account is not None:
        out.extend(account_lines(result.account))
    out.append(header(layout))
    out.extend(transaction_row(t, layout) for t in result.transactions)
    return out


def _target_mode(out_path: Path) -> int:
    """Modo del destino si ya existe; si no, 0o666 menos la umask (como open())."""
    try:
        return out_path.stat().st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_csv(lines: Iterable[str], out_path: Union[str, Path]) -> Path:
    """
    Escribe todo o nada: primero a un temporal en el mismo directorio,
    después os.replace sobre el destino.
    """
    out_path = Path(out_path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{out_path.name}.", suffix=".tmp", dir=out_path.parent
        )
    except OSError as e:
        raise SinkUnavailable(out_path, e.strerror or str(e)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
        os.chmod(tmp_name, _target_mode(out_path))
        os.replace(tmp_name, out_path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise SinkUnavailable(out_path, e.strerror or str(e)) from e

    return out_path
