"""
Delimiter profiles and the pinned CSV dialect.

A DelimiterProfile fixes the field separator, header presence, and quote handling for
one reader or writer. Tokenizing and quoting are delegated to the stdlib csv module with
a single pinned dialect so written output is stable:

- quotechar '"', doubled embedded quotes (doublequote=True), no escapechar
- QUOTE_MINIMAL when quoting is enabled: only fields containing the delimiter, the quote
  character, '\\r' or '\\n' are quoted
- QUOTE_NONE with no quotechar when quoting is disabled: quotes are literal text both ways,
  and a field containing the delimiter or a line break cannot be written
- lineterminator '\\n'

Notes:
    - Zero-IO; stdlib only.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass

__all__ = [
    "COMMA",
    "TAB",
    "DelimiterProfile",
]

COMMA = ","
TAB = "\t"


@dataclass(frozen=True)
class DelimiterProfile:
    """
    Separator and header configuration for delimited text.

    Attributes:
        delimiter (str): Single-character field separator ("," or "\\t" in practice).
        has_header (bool): Whether the first row holds column names.
        quote (bool): Whether quoted fields are recognized (read) and produced (write).

    Raises:
        ValueError: If delimiter is not a single character, or is the quote character or a
            line break.

    Examples:
        >>> DelimiterProfile.tsv().delimiter == "\\t"
        True
        >>> DelimiterProfile.csv(has_header=False).has_header
        False
    """

    delimiter: str = COMMA
    has_header: bool = True
    quote: bool = True

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character; got {self.delimiter!r}")
        if self.delimiter in ('"', "\r", "\n"):
            raise ValueError(f"delimiter {self.delimiter!r} collides with quoting or line breaks")

    @classmethod
    def csv(cls, has_header: bool = True, quote: bool = True) -> DelimiterProfile:
        return cls(delimiter=COMMA, has_header=has_header, quote=quote)

    @classmethod
    def tsv(cls, has_header: bool = True, quote: bool = True) -> DelimiterProfile:
        return cls(delimiter=TAB, has_header=has_header, quote=quote)

    def dialect_options(self) -> dict[str, object]:
        """Keyword arguments for csv.reader/csv.writer implementing the pinned dialect."""
        return {
            "delimiter": self.delimiter,
            "quotechar": '"' if self.quote else None,
            "doublequote": True,
            "escapechar": None,
            "quoting": csv.QUOTE_MINIMAL if self.quote else csv.QUOTE_NONE,
            "lineterminator": "\n",
            "skipinitialspace": False,
            "strict": False,
        }
