"""Unicode character properties consulted by the IDNA context and bidi rules"""
import unicodedata
from functools import lru_cache
from typing import Optional

from idnakit.core.table import RangeMap, read_data_file

JOINING_TYPE_FILE = "JoiningType.txt"
SCRIPTS_FILE = "Scripts.txt"

VIRAMA_COMBINING_CLASS = 9


@lru_cache(maxsize=None)
def _joining_types() -> RangeMap:
    return RangeMap.from_text(read_data_file(JOINING_TYPE_FILE))


@lru_cache(maxsize=None)
def _scripts() -> RangeMap:
    return RangeMap.from_text(read_data_file(SCRIPTS_FILE))


def joining_type(char: str) -> str:
    """Joining_Type of a character: one of C, D, L, R, T, U"""
    return _joining_types().get(ord(char), "U")


def script(char: str) -> Optional[str]:
    """Script name, for the scripts listed in Scripts.txt only"""
    return _scripts().get(ord(char))


def bidi_class(char: str) -> str:
    # Unassigned code points report '', which the bidi rule treats as L
    return unicodedata.bidirectional(char) or "L"


def is_mark(char: str) -> bool:
    """General_Category is Mn, Mc or Me"""
    return unicodedata.category(char).startswith("M")


def is_virama(char: str) -> bool:
    return unicodedata.combining(char) == VIRAMA_COMBINING_CLASS


def is_nfc(text: str) -> bool:
    return unicodedata.is_normalized("NFC", text)


def nfc(text: str) -> str:
    return unicodedata.normalize("NFC", text)
