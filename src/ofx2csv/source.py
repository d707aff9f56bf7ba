from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .errors import SourceUnavailable


logger = logging.getLogger(__name__)

# Los OFX 1.x de la mayoría de bancos salen en cp1252
FALLBACK_ENCODING = "cp1252"


def split_lines(text: str) -> List[str]:
    """
    Corta solo en \\n, \\r y \\r\\n (str.splitlines corta también en \\f, \\x85, U+2028...).
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def read_lines(path: Union[str, Path], encoding: Optional[str] = None) -> List[str]:
    """
    Lee el archivo completo y devuelve sus líneas crudas (sin salto de línea).
    Sin `encoding` prueba UTF-8 y cae a cp1252.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SourceUnavailable(path, e.strerror or str(e)) from e

    if encoding:
        try:
            text = raw.decode(encoding)
        except (LookupError, UnicodeDecodeError) as e:
            raise SourceUnavailable(path, str(e)) from e
    else:
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.debug("%s no es UTF-8, usando %s", path, FALLBACK_ENCODING)
            text = raw.decode(FALLBACK_ENCODING, errors="replace")
            if "\ufffd" in text:
                logger.warning(
                    "%s: bytes sin equivalente en %s reemplazados por U+FFFD", path, FALLBACK_ENCODING
                )

    return split_lines(text)
