from __future__ import annotations

import datetime
import re

from .errors import DateParseFailure


# yyyyMMdd o yyyyMMddHHmmss, con milisegundos opcionales (.XXX)
OFX_DATE_RE = re.compile(r"^(\d{8})(\d{6})?(?:\.\d{1,6})?$")

# style -> (solo fecha, fecha y hora)
DATE_STYLES = {
    "iso": ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S"),
    "dmy": ("%d/%m/%Y", "%d/%m/%Y %H:%M:%S"),
}


def strip_timezone(raw: str) -> str:
    """`20230615120000[-3:GMT]` -> `20230615120000`"""
    return raw.split("[", 1)[0].strip()


def format_ofx_date(raw: str, style: str = "iso") -> str:
    """
    Reformatea una fecha OFX ya sin la zona horaria.
    Lanza DateParseFailure si no encaja en yyyyMMdd[HHmmss] o no es una fecha real.
    """
    date_fmt, datetime_fmt = DATE_STYLES[style]

    m = OFX_DATE_RE.match(raw)
    if not m:
        raise DateParseFailure(raw)

    day, clock = m.group(1), m.group(2)
    try:
        if clock:
            dt = datetime.datetime.strptime(day + clock, "%Y%m%d%H%M%S")
            return dt.strftime(datetime_fmt)
        dt = datetime.datetime.strptime(day, "%Y%m%d")
    except ValueError:
        # p.ej. 20231340
        raise DateParseFailure(raw) from None
    return dt.strftime(date_fmt)
