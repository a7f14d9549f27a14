"""

config.py

Converter settings that can be stored in a JSON file, so that the timing
calibration and output options of a setup do not need to be repeated on the
command line. Keys missing from the file keep their default values.

Example file:

  {
    "instrument": "fluorescence",
    "fluorescence": {"sync_delay": 12, "ns_per_channel": 0.0244},
    "preamble": true
  }

"""
from typing import Any, Dict
from dataclasses import asdict, dataclass, field, fields

import json

from .errors import ConversionError, IoError, ParseError
from .formats.fluorescence import fluorescence_settings
from .formats.transient import transient_settings

DELIMITERS = {"tab": "\t", "space": " ", "comma": ","}


def resolve_delimiter(name: str) -> str:
    return DELIMITERS.get(name, name)


@dataclass
class converter_config:
    instrument: str = "transient"
    transient: transient_settings = field(default_factory=transient_settings)
    fluorescence: fluorescence_settings = field(default_factory=fluorescence_settings)
    delimiter: str = "tab"
    preamble: bool = False
    comment: str = ""
    suffix: str = ".ascii"
    log_level: str = "INFO"

    def settings_for(self, instrument: str):
        return getattr(self, instrument)


__nested__ = {"transient": transient_settings, "fluorescence": fluorescence_settings}
__json_types__ = {bool: bool, int: int, float: (int, float), str: str}


def _check_keys(cls, data: Dict[str, Any], context: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConversionError(f"Unknown configuration keys in {context}: {', '.join(unknown)}")


def _check_types(cls, data: Dict[str, Any], context: str) -> None:
    """
    JSON values must match the dataclass field types, integers are accepted
    for float fields.
    """
    for f in fields(cls):
        if f.name not in data or f.type not in __json_types__:
            continue
        value = data[f.name]
        if isinstance(value, bool) and f.type is not bool:
            ok = False
        else:
            ok = isinstance(value, __json_types__[f.type])
        if not ok:
            raise ConversionError(
                f"Configuration key {f.name!r} in {context} must be {f.type.__name__}, got {value!r}"
            )


def config_from_dict(data: Dict[str, Any], context: str = "configuration") -> converter_config:
    _check_keys(converter_config, data, context)
    _check_types(converter_config, data, context)
    values = dict(data)
    for key, cls in __nested__.items():
        if key in values:
            if not isinstance(values[key], dict):
                raise ConversionError(f"Section {key!r} of {context} must be a JSON object")
            _check_keys(cls, values[key], f"{context} [{key}]")
            _check_types(cls, values[key], f"{context} [{key}]")
            values[key] = cls(**values[key])
    return converter_config(**values)


def load_config(filepath: str) -> converter_config:
    """
    Loading the configuration from a JSON file.
    """
    filepath = str(filepath)
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as err:
        raise IoError(filepath, f"Cannot read configuration ({err.strerror})") from err
    except json.JSONDecodeError as err:
        raise ParseError(filepath, f"Invalid JSON ({err.msg})", err.lineno) from err
    if not isinstance(data, dict):
        raise ParseError(filepath, "Configuration must be a JSON object")
    return config_from_dict(data, context=filepath)


def save_config(config: converter_config, filepath: str) -> None:
    filepath = str(filepath)
    try:
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(asdict(config), f, indent=2)
    except OSError as err:
        raise IoError(filepath, f"Cannot write configuration ({err.strerror})") from err
