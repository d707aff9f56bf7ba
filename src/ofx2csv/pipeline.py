from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .convert import convert_file
from .errors import OfxError
from .models import LAYOUTS, CsvLayout, format_amount


def _configure_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Conversor OFX -> CSV")
    parser.add_argument("file", help="Ruta al archivo OFX")
    parser.add_argument("--out", default="", help="Ruta de salida CSV (por defecto: mismo nombre con .csv)")
    parser.add_argument("--layout", choices=sorted(LAYOUTS), default="memo", help="Variante de salida")
    parser.add_argument("--delimiter", choices=[",", ";"], default=None, help="Sobrescribe el delimitador")
    parser.add_argument("--memo", dest="include_memo", action=argparse.BooleanOptionalAction, default=None,
                        help="Incluir la columna Memo")
    parser.add_argument("--account", dest="include_account", action=argparse.BooleanOptionalAction, default=None,
                        help="Incluir el bloque con los datos de la cuenta")
    parser.add_argument("--date-style", choices=["iso", "dmy"], default=None,
                        help="iso = yyyy-MM-dd HH:mm:ss, dmy = dd/MM/yyyy HH:mm:ss")
    parser.add_argument("--encoding", default=None, help="Encoding del OFX (por defecto: UTF-8 y si falla cp1252)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Logging detallado")
    return parser


def layout_from_args(args: argparse.Namespace) -> CsvLayout:
    overrides = {
        k: v
        for k, v in (
            ("delimiter", args.delimiter),
            ("include_memo", args.include_memo),
            ("include_account", args.include_account),
            ("date_style", args.date_style),
        )
        if v is not None
    }
    return LAYOUTS[args.layout].model_copy(update=overrides)


def _transactions_table(conversion, layout: CsvLayout) -> Table:
    table = Table(title="Transactions")
    for col in layout.columns:
        table.add_column(col, justify="right" if col == "Amount" else "left")
    for t in conversion.result.transactions:
        cells = [t.type, t.date, format_amount(t.amount), t.id, t.name or ""]
        if layout.include_memo:
            cells.append(t.memo or "")
        table.add_row(*(escape(c) for c in cells))
    return table


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    ofx_path = Path(args.file)
    if not ofx_path.exists():
        raise SystemExit(f"No existe el archivo: {ofx_path}")

    console = Console()
    _configure_logging(console, args.verbose)
    console.print(f"Procesando: {escape(str(ofx_path))}", style="bold")

    layout = layout_from_args(args)
    try:
        conversion = convert_file(ofx_path, layout, out_path=args.out or None, encoding=args.encoding)
    except OfxError as e:
        console.print(f"ERROR: {escape(str(e))}", style="bold red")
        return 1

    if not conversion.result.transactions:
        console.print("No transactions found in the file.", style="bold yellow")
        return 0

    console.print(_transactions_table(conversion, layout))
    if conversion.result.warnings:
        console.print(f"Fechas sin reformatear: {len(conversion.result.warnings)}", style="yellow")
    console.print(f"Transactions saved to CSV: {escape(str(conversion.out_path))}", style="bold green")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
