from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .models import CsvLayout, ParseResult
from .parse import parse_lines
from .source import read_lines
from .write import csv_path_for, render_csv, save_csv


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversion:
    ofx_path: Path
    result: ParseResult
    out_path: Optional[Path]  # None si no había transacciones


def convert_file(
    ofx_path: Union[str, Path],
    layout: Optional[CsvLayout] = None,
    out_path: Optional[Union[str, Path]] = None,
    encoding: Optional[str] = None,
) -> Conversion:
    layout = layout or CsvLayout()
    ofx_path = Path(ofx_path)

    lines = read_lines(ofx_path, encoding=encoding)
    result = parse_lines(lines, date_style=layout.date_style)
    logger.debug("%s: %d transactions, %d warnings", ofx_path, len(result.transactions), len(result.warnings))

    if not result.transactions:
        return Conversion(ofx_path=ofx_path, result=result, out_path=None)

    target = Path(out_path) if out_path else csv_path_for(ofx_path)
    saved = save_csv(render_csv(result, layout), target)
    return Conversion(ofx_path=ofx_path, result=result, out_path=saved)
