from typing import Optional, Sequence


class IDNAError(Exception):
    """Base class for every error raised by idnakit"""

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        codes: Sequence[str] = ()
    ):
        super().__init__(message)
        self.domain = domain
        self.codes = tuple(codes)


class TableError(IDNAError):
    """The mapping table data is corrupt (unsorted, overlapping or unparsable ranges)"""


class PunycodeError(IDNAError, ValueError):
    """
    Punycode encode/decode failure.

    Attributes:
        code: Status token recorded when the failure is recovered
              at a label boundary ("P4" for decoding, "A3" for encoding)
    """

    def __init__(
        self,
        message: str,
        code: str = "P4",
        domain: Optional[str] = None,
        codes: Sequence[str] = ()
    ):
        super().__init__(message, domain=domain, codes=codes or (code,))
        self.code = code


class MappingError(IDNAError):
    """A label contains a disallowed code point"""


class ValidityError(IDNAError):
    """A label or domain failed a validity, context, bidi or length check"""
