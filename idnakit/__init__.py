"""
idnakit - UTS #46 / IDNA2008 domain name processing.

    >>> import idnakit
    >>> idnakit.to_ascii("Bücher.example").result
    'xn--bcher-kva.example'
    >>> idnakit.decode("xn--bcher-kva.example")
    'bücher.example'
"""
from functools import lru_cache
from typing import Any, Optional, Union

from idnakit.core.config import PROFILES, IDNAOptions, get_profile, load_options
from idnakit.core.errors import IDNAError, MappingError, PunycodeError, TableError, ValidityError
from idnakit.core.table import (
    Classification,
    Deviation,
    Disallowed,
    Idna2008Status,
    Ignored,
    Kind,
    Mapped,
    MappingTable,
    Valid,
    default_table,
    load_table,
)
from idnakit.modules.base import Direction
from idnakit.modules.domain import DomainProcessor
from idnakit.modules.label import LabelProcessor
from idnakit.modules.status import DomainResult, LabelResult, StatusCode

__version__ = "0.1.0"

OptionsLike = Union[IDNAOptions, str, None]


def classify(cp: Union[int, str]) -> Classification:
    """Classify a code point with the packaged mapping table"""
    return default_table().classify(cp)


@lru_cache(maxsize=32)
def _processor(options: IDNAOptions) -> DomainProcessor:
    return DomainProcessor(default_table(), options)


def _resolve_options(options: OptionsLike, overrides: dict) -> IDNAOptions:
    if options is None:
        options = PROFILES["default"]
    elif isinstance(options, str):
        options = get_profile(options)
    if overrides:
        options = options.replace(**overrides)
    return options


def to_unicode(domain: Union[str, bytes], options: OptionsLike = None, **overrides: Any) -> DomainResult:
    """
    ToUnicode a domain name.

    Args:
        domain: Domain name as str or UTF-8 bytes
        options: IDNAOptions, a profile name, or None for the default profile
        **overrides: Individual option overrides (e.g., use_std3=True)

    Returns:
        DomainResult
    """
    return _processor(_resolve_options(options, overrides)).to_unicode(domain)


def to_ascii(domain: Union[str, bytes], options: OptionsLike = None, **overrides: Any) -> DomainResult:
    """
    ToASCII a domain name.

    Args:
        domain: Domain name as str or UTF-8 bytes
        options: IDNAOptions, a profile name, or None for the default profile
        **overrides: Individual option overrides (e.g., transitional=True)

    Returns:
        DomainResult
    """
    return _processor(_resolve_options(options, overrides)).to_ascii(domain)


def encode(domain: Union[str, bytes], options: OptionsLike = None, **overrides: Any) -> str:
    """
    ToASCII, raising on failure.

    Raises:
        IDNAError: MappingError, PunycodeError or ValidityError
    """
    return to_ascii(domain, options, **overrides).raise_for_status().result


def decode(domain: Union[str, bytes], options: OptionsLike = None, **overrides: Any) -> str:
    """
    ToUnicode, raising on failure.

    Raises:
        IDNAError: MappingError, PunycodeError or ValidityError
    """
    return to_unicode(domain, options, **overrides).raise_for_status().result


__all__ = [
    'classify',
    'to_unicode',
    'to_ascii',
    'encode',
    'decode',
    'IDNAOptions',
    'PROFILES',
    'get_profile',
    'load_options',
    'Kind',
    'Idna2008Status',
    'Classification',
    'Valid',
    'Mapped',
    'Deviation',
    'Disallowed',
    'Ignored',
    'MappingTable',
    'default_table',
    'load_table',
    'Direction',
    'DomainProcessor',
    'LabelProcessor',
    'StatusCode',
    'LabelResult',
    'DomainResult',
    'IDNAError',
    'MappingError',
    'PunycodeError',
    'TableError',
    'ValidityError',
]
