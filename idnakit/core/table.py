"""
IDNA mapping table: phân loại mọi code point Unicode (0..0x10FFFF).

The table is a sorted sequence of disjoint ranges, each carrying one
classification. Lookups bisect over the range starts. Anything not covered
by a range is Disallowed, so `classify` is total.
"""
import bisect
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from idnakit.core.errors import TableError
from idnakit.core.utils import iter_ucd_records, read_version

logger = logging.getLogger("idnakit.table")

MAX_CODEPOINT = 0x10FFFF
DATA_PACKAGE = "idnakit.core.data"
TABLE_FILE = "IdnaMappingTable.txt"

T = TypeVar("T")


class Kind(Enum):
    """UTS #46 code point status"""
    VALID = "valid"
    MAPPED = "mapped"
    DEVIATION = "deviation"
    DISALLOWED = "disallowed"
    IGNORED = "ignored"


class Idna2008Status(Enum):
    """IDNA2008 annotation on a valid code point"""
    NV8 = "NV8"
    XV8 = "XV8"


# ========================================
# CLASSIFICATION VARIANTS
# ========================================

@dataclass(frozen=True)
class Valid:
    status: Optional[Idna2008Status] = None
    kind = Kind.VALID


@dataclass(frozen=True)
class Mapped:
    replacement: str
    kind = Kind.MAPPED


@dataclass(frozen=True)
class Deviation:
    # Nontransitional processing keeps the code point; transitional uses this
    replacement: str
    kind = Kind.DEVIATION


@dataclass(frozen=True)
class Disallowed:
    kind = Kind.DISALLOWED


@dataclass(frozen=True)
class Ignored:
    kind = Kind.IGNORED


Classification = Union[Valid, Mapped, Deviation, Disallowed, Ignored]

VALID = Valid()
VALID_NV8 = Valid(Idna2008Status.NV8)
VALID_XV8 = Valid(Idna2008Status.XV8)
DISALLOWED = Disallowed()
IGNORED = Ignored()

_VARIANTS = (Valid, Mapped, Deviation, Disallowed, Ignored)


class RangeMap(Generic[T]):
    """
    Sorted store of (start, end, value) code point ranges.

    Ranges are validated on construction: each must lie in 0..0x10FFFF,
    have start <= end and begin after the previous range ends.
    """

    def __init__(self, ranges: Sequence[Tuple[int, int, T]]):
        self._ranges: Tuple[Tuple[int, int, T], ...] = tuple(ranges)
        self._validate()
        self._starts: List[int] = [start for start, _, _ in self._ranges]

    def _validate(self) -> None:
        prev_end = -1
        for start, end, _ in self._ranges:
            if start < 0 or end > MAX_CODEPOINT or start > end:
                raise TableError(f"Invalid range {start:04X}..{end:04X}")
            if start <= prev_end:
                raise TableError(
                    f"Range {start:04X}..{end:04X} overlaps or precedes "
                    f"the range ending at {prev_end:04X}"
                )
            prev_end = end

    def get(self, cp: int, default: Any = None) -> Any:
        """Value of the range containing cp, or default"""
        i = bisect.bisect_right(self._starts, cp) - 1
        if i >= 0:
            _, end, value = self._ranges[i]
            if cp <= end:
                return value
        return default

    @property
    def ranges(self) -> Tuple[Tuple[int, int, T], ...]:
        return self._ranges

    def __len__(self) -> int:
        return len(self._ranges)

    @classmethod
    def from_text(cls, text: str) -> "RangeMap[str]":
        """Build a map from a 'range ; value' data file"""
        records = [(start, end, fields[0]) for start, end, fields in iter_ucd_records(text)]
        records.sort(key=lambda r: r[0])
        return cls(records)


class MappingTable(RangeMap[Classification]):
    """
    Immutable UTS #46 mapping table.

    Args:
        ranges: Sorted, disjoint (start, end, Classification) ranges
        version: Unicode version of the source data
    """

    def __init__(
        self,
        ranges: Sequence[Tuple[int, int, Classification]],
        version: str = "unknown"
    ):
        super().__init__(ranges)
        self.version = version
        for start, end, value in self._ranges:
            if not isinstance(value, _VARIANTS):
                raise TableError(f"Range {start:04X}..{end:04X} has no classification: {value!r}")

    def classify(self, cp: Union[int, str]) -> Classification:
        """
        Classify a code point.

        Args:
            cp: Code point as an int or a one-character string

        Returns:
            The classification; Disallowed for anything outside the table
        """
        if isinstance(cp, str):
            cp = ord(cp)
        return self.get(cp, DISALLOWED)

    @classmethod
    def from_text(cls, text: str) -> "MappingTable":
        """
        Parse IdnaMappingTable.txt content.

        Raises:
            TableError: On malformed lines, unknown statuses or invalid ranges
        """
        ranges = []
        for start, end, fields in iter_ucd_records(text):
            ranges.append((start, end, _parse_classification(fields, start)))
        ranges.sort(key=lambda r: r[0])
        return cls(ranges, version=read_version(text))

    def __repr__(self):
        return f"<MappingTable version={self.version} ranges={len(self)}>"


def _parse_replacement(field: str, cp: int) -> str:
    try:
        return "".join(chr(int(scalar, 16)) for scalar in field.split())
    except ValueError:
        raise TableError(f"Invalid mapping for {cp:04X}: {field!r}") from None


def _parse_classification(fields: List[str], cp: int) -> Classification:
    status = fields[0]
    mapping = fields[1] if len(fields) > 1 else ""
    annotation = fields[2] if len(fields) > 2 else ""

    if status == "valid":
        if not annotation:
            return VALID
        if annotation == "NV8":
            return VALID_NV8
        if annotation == "XV8":
            return VALID_XV8
        raise TableError(f"Unknown IDNA2008 status for {cp:04X}: {annotation!r}")
    if status == "mapped":
        if not mapping:
            raise TableError(f"Mapped code point {cp:04X} has no mapping")
        return Mapped(_parse_replacement(mapping, cp))
    if status == "deviation":
        return Deviation(_parse_replacement(mapping, cp))
    if status == "disallowed":
        return DISALLOWED
    if status == "ignored":
        return IGNORED
    raise TableError(f"Unknown status for {cp:04X}: {status!r}")


def read_data_file(name: str) -> str:
    """Read a file shipped in idnakit/core/data"""
    return resources.files(DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8")


def load_table(path: Optional[Union[str, Path]] = None) -> MappingTable:
    """
    Load a mapping table.

    Args:
        path: IdnaMappingTable.txt to read; the packaged table when None

    Returns:
        MappingTable
    """
    if path is None:
        text = read_data_file(TABLE_FILE)
        source = f"{DATA_PACKAGE}/{TABLE_FILE}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    table = MappingTable.from_text(text)
    logger.info(f"Loaded IDNA mapping table {table.version} ({len(table)} ranges) from {source}")
    return table


@lru_cache(maxsize=None)
def default_table() -> MappingTable:
    """Process-wide table built from the packaged data on first use"""
    return load_table()
