"""
Character sets for `one_of` and `none_of`.
"""

from __future__ import annotations
from typing import Final

BLANK: Final[str] = " \t"
WHITESPACE: Final[str] = " \t\n\r\f"
BINARY: Final[str] = "01"
OCTAL: Final[str] = "01234567"
DECIMAL: Final[str] = "0123456789"
HEXADECIMAL: Final[str] = DECIMAL + "abcdefABCDEF"
LOWERCASE: Final[str] = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE: Final[str] = LOWERCASE.upper()
ALPHABETIC: Final[str] = LOWERCASE + UPPERCASE
ALNUM: Final[str] = ALPHABETIC + DECIMAL
