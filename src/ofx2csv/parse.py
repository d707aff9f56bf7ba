from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from .dates import format_ofx_date, strip_timezone
from .errors import AmountParseFailure, DateParseFailure, MalformedStructure
from .models import AccountDetails, ParseResult, Transaction


logger = logging.getLogger(__name__)

# Primer token de la línea: <TAG> o </TAG>
TAG_RE = re.compile(r"^<(/?[A-Za-z0-9.]+)>")
AMOUNT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

OPEN_TAG = "STMTTRN"
CLOSE_TAG = "/STMTTRN"

TRANSACTION_FIELDS = {
    "TRNTYPE": "type",
    "DTPOSTED": "date",
    "TRNAMT": "amount",
    "FITID": "id",
    "NAME": "name",
    "MEMO": "memo",
}

ACCOUNT_FIELDS = {
    "BANKID": "bank_id",
    "ACCTID": "account_id",
    "ACCTTYPE": "account_type",
    "DTSTART": "start_date",
    "DTEND": "end_date",
    "BALAMT": "balance",
    "DTASOF": "date_as_of",
}

DATE_TAGS = {"DTPOSTED", "DTSTART", "DTEND", "DTASOF"}


def extract_value(line: str, tag: str) -> str:
    """`<FITID>123</FITID>` -> `123`. El cierre es opcional en OFX."""
    return line.replace(f"<{tag}>", "").replace(f"</{tag}>", "").strip()


def _parse_amount(value: str, line_number: int, line: str) -> float:
    # Siempre punto decimal, sin separador de miles
    if not AMOUNT_RE.match(value):
        raise AmountParseFailure(line_number, line, value)
    return float(value)


def parse_lines(lines: Iterable[str], date_style: str = "iso") -> ParseResult:
    """
    Parser stateful de una sola pasada:
    - <STMTTRN> abre una transacción, </STMTTRN> la cierra y la agrega al resultado
    - los tags de campo (TRNTYPE, DTPOSTED, ...) solo valen con una transacción abierta
    - los tags de cuenta (BANKID, ACCTID, ...) se aceptan en cualquier momento
    - el resto de las líneas se ignora
    """
    transactions: List[Transaction] = []
    warnings: List[str] = []
    account: Optional[AccountDetails] = None

    # None => Idle, Transaction => armando un registro
    current: Optional[Transaction] = None
    opened_at = 0

    def _date(raw: str, line_number: int) -> str:
        raw = strip_timezone(raw)
        try:
            return format_ofx_date(raw, date_style)
        except DateParseFailure as e:
            msg = f"line {line_number}: {e}"
            logger.warning(msg)
            warnings.append(msg)
            return raw

    line_number = 0
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        m = TAG_RE.match(line)
        if not m:
            continue
        tag = m.group(1)

        if tag == OPEN_TAG:
            if current is not None:
                raise MalformedStructure(
                    line_number, line, f"<STMTTRN> opened at line {opened_at} was never closed"
                )
            current = Transaction()
            opened_at = line_number

        elif tag == CLOSE_TAG:
            if current is None:
                raise MalformedStructure(line_number, line, "</STMTTRN> without an open transaction")
            logger.debug("line %d: %s", line_number, current.summary())
            transactions.append(current)
            current = None

        elif tag in TRANSACTION_FIELDS:
            if current is None:
                raise MalformedStructure(line_number, line, f"<{tag}> outside of <STMTTRN>")
            value = extract_value(line, tag)
            if tag == "TRNAMT":
                current.amount = _parse_amount(value, line_number, line)
            elif tag in DATE_TAGS:
                current.date = _date(value, line_number)
            else:
                setattr(current, TRANSACTION_FIELDS[tag], value)

        elif tag in ACCOUNT_FIELDS:
            if account is None:
                account = AccountDetails()
            value = extract_value(line, tag)
            if tag in DATE_TAGS:
                value = _date(value, line_number)
            setattr(account, ACCOUNT_FIELDS[tag], value)

    if current is not None:
        raise MalformedStructure(
            line_number, "", f"<STMTTRN> opened at line {opened_at} was never closed"
        )

    return ParseResult(account=account, transactions=transactions, warnings=warnings)
