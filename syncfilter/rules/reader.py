"""Read rule sources into lines."""

import codecs
import re
from typing import IO, List, Tuple, Union

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def number_lines(data: Union[str, bytes]) -> List[Tuple[int, str]]:
    """Split rule text into non-empty lines with their source line numbers.

    Bytes are decoded as UTF-8 (a leading byte order mark is dropped).
    ``\\n``, ``\\r\\n`` and ``\\r`` all end a line. Empty lines are omitted
    but still counted, so numbers are 1-based positions in the source;
    comment lines are kept so the chain can skip them itself.

    Raises:
        UnicodeDecodeError: If bytes are not valid UTF-8
    """
    if isinstance(data, bytes):
        if data.startswith(codecs.BOM_UTF8):
            data = data[len(codecs.BOM_UTF8):]
        data = data.decode("utf-8")
    elif data.startswith("\ufeff"):
        data = data[1:]

    return [(lineno, line) for lineno, line in enumerate(_LINE_BREAK.split(data), start=1) if line]


def split_lines(data: Union[str, bytes]) -> List[str]:
    """Like :func:`number_lines`, without the line numbers."""
    return [line for _, line in number_lines(data)]


def read_numbered_lines(stream: IO) -> List[Tuple[int, str]]:
    """Read a whole text or binary stream and split it with :func:`number_lines`."""
    return number_lines(stream.read())


def read_lines(stream: IO) -> List[str]:
    """Read a whole text or binary stream and split it with :func:`split_lines`."""
    return split_lines(stream.read())
