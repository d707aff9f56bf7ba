from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


CENTS = Decimal("0.01")
# alcanza para cualquier float finito (~1.8e308)
_WIDE = Context(prec=400)


def format_amount(amount: float) -> str:
    """Dos decimales con punto, redondeo half-up (0.125 -> 0.13)."""
    return str(Decimal(repr(amount)).quantize(CENTS, rounding=ROUND_HALF_UP, context=_WIDE))


class Transaction(BaseModel):
    type: str = Field("", description="TRNTYPE, p.ej. DEBIT / CREDIT")
    date: str = Field("", description="DTPOSTED reformateada, o el valor crudo si no se pudo parsear")
    amount: float = Field(0.0, description="Signed amount. Negative=outflow, Positive=inflow")
    id: str = Field("", description="FITID")
    name: Optional[str] = None
    memo: Optional[str] = None

    def summary(self) -> str:
        return (
            f"Type: {self.type}, Date: {self.date}, Amount: {format_amount(self.amount)}, "
            f"ID: {self.id}, Name: {self.name or ''}, Memo: {self.memo or ''}"
        )


ACCOUNT_LABELS: Tuple[Tuple[str, str], ...] = (
    ("bank_id", "Bank ID"),
    ("account_id", "Account ID"),
    ("account_type", "Account Type"),
    ("start_date", "Start Date"),
    ("end_date", "End Date"),
    ("balance", "Balance"),
    ("date_as_of", "Date As Of"),
)


class AccountDetails(BaseModel):
    bank_id: Optional[str] = None
    account_id: Optional[str] = None
    account_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    balance: Optional[str] = None
    date_as_of: Optional[str] = None

    def labeled(self) -> List[Tuple[str, str]]:
        """Pares (etiqueta, valor) en el orden fijo de salida."""
        return [(label, getattr(self, attr) or "") for attr, label in ACCOUNT_LABELS]


class ParseResult(BaseModel):
    account: Optional[AccountDetails] = None
    transactions: List[Transaction] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class CsvLayout(BaseModel):
    delimiter: str = ";"
    include_memo: bool = True
    include_account: bool = False
    date_style: Literal["iso", "dmy"] = "iso"

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, v: str) -> str:
        if v not in (",", ";"):
            raise ValueError(f"delimiter must be ',' or ';', got {v!r}")
        return v

    @property
    def columns(self) -> List[str]:
        cols = ["Type", "Date", "Amount", "ID", "Name"]
        if self.include_memo:
            cols.append("Memo")
        return cols


# Variantes conocidas del conversor
LAYOUTS = {
    "memo": CsvLayout(delimiter=";", include_memo=True, include_account=False),
    "account": CsvLayout(delimiter=",", include_memo=False, include_account=True),
}
