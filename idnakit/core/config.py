import dataclasses
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, Union

import yaml

from idnakit.core.errors import IDNAError


class ConfigProtocol(Protocol):
    """Interface for configuration objects"""
    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by key"""
        ...


@dataclass(frozen=True)
class IDNAOptions:
    # Only [a-z0-9-] allowed among ASCII code points (U1)
    use_std3: bool = False
    # Map deviation characters (ß, ς, ZWJ, ZWNJ) instead of keeping them
    transitional: bool = False
    # ToASCII: labels 1..63 octets, name 1..253 octets (A4_1, A4_2)
    verify_dns_length: bool = True
    # No leading/trailing hyphen, no '--' at positions 3-4 (V2, V3)
    check_hyphens: bool = True
    # RFC 5893 bidi rule, applied once the domain has an RTL label (B1-B6)
    check_bidi: bool = True
    # RFC 5892 CONTEXTJ rules for ZWNJ/ZWJ (C1, C2)
    check_joiners: bool = True
    # RFC 5892 CONTEXTO rules (middle dot, keraia, geresh, katakana middle dot, digits)
    check_contexto: bool = True
    # Keep labels with undecodable 'xn--' content instead of reporting P4
    ignore_invalid_punycode: bool = False

    def replace(self, **overrides: Any) -> "IDNAOptions":
        """
        Copy with some fields changed.

        Raises:
            IDNAError: On unknown option names or non-boolean values
        """
        _check_option_values(overrides)
        return dataclasses.replace(self, **overrides)

    def as_dict(self) -> Dict[str, bool]:
        return asdict(self)


OPTION_NAMES = tuple(f.name for f in fields(IDNAOptions))

PROFILES = {
    # UTS #46 defaults, STD3 rules off
    "default": IDNAOptions(),
    # Every check on
    "strict": IDNAOptions(use_std3=True),
    # Mapping and normalization only
    "lax": IDNAOptions(
        verify_dns_length=False,
        check_hyphens=False,
        check_bidi=False,
        check_joiners=False,
        check_contexto=False,
        ignore_invalid_punycode=True,
    ),
    # Settings the IdnaTestV2.txt conformance data is generated with
    "conformance": IDNAOptions(use_std3=True, check_contexto=False),
    # IDNA2003-compatible deviation handling
    "transitional": IDNAOptions(transitional=True),
}


def _check_option_values(values: Mapping[str, Any]) -> None:
    unknown = [key for key in values if key not in OPTION_NAMES]
    if unknown:
        raise IDNAError(
            f"Unknown IDNA options: {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(OPTION_NAMES)}"
        )
    for key, value in values.items():
        if not isinstance(value, bool):
            raise IDNAError(f"Option '{key}' must be true or false, got {value!r}")


def get_profile(name: str) -> IDNAOptions:
    """
    Look up a named profile.

    Raises:
        IDNAError: If the profile does not exist
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise IDNAError(
            f"Unknown profile '{name}'. Available: {', '.join(PROFILES)}"
        ) from None


def options_from_mapping(data: Mapping[str, Any]) -> IDNAOptions:
    """
    Build options from a mapping such as a parsed YAML document.

    The optional 'profile' key selects the base profile; the other keys
    override its fields.
    """
    values = dict(data)
    base = get_profile(values.pop("profile", "default"))
    return base.replace(**values)


def load_options(path: Union[str, Path]) -> IDNAOptions:
    """
    Load options from a YAML file.

    The file is either a flat mapping or has the options under an 'idna' key:

        idna:
          profile: strict
          check_bidi: false

    Raises:
        IDNAError: If the file is not a mapping or has invalid options
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if isinstance(data, dict) and isinstance(data.get("idna"), dict):
        data = data["idna"]
    if not isinstance(data, dict):
        raise IDNAError(f"{path}: expected a mapping of IDNA options")
    return options_from_mapping(data)


def options_from_config(config: ConfigProtocol) -> IDNAOptions:
    """
    Build options from 'idna.<name>' keys of a config object.

    Raises:
        IDNAError: On an unknown profile or a value that is not a bool
    """
    base = get_profile(config.get("idna.profile", "default"))
    overrides = {}
    for name in OPTION_NAMES:
        value = config.get(f"idna.{name}", None)
        if value is not None:
            overrides[name] = value
    return base.replace(**overrides)
