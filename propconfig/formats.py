"""Source formats and the parsers that turn raw bytes into flat property maps.

Properties is the native format. Ini, Json, Toml and Yaml documents are
flattened into the same dotted-key shape, so

    a:
      b: 1
      c: [3, 4]

reads the same as

    a.b=1
    a.c=3, 4

"""

import configparser
import json
import os
import urllib.parse
from typing import Any
from typing import AnyStr
from typing import Dict
from typing import List

import aenum
import jproperties
import toml
import yaml

from propconfig.exceptions import LoadFailure


try:
    from yaml import CSafeLoader as SafeLoader
except ImportError:
    from yaml import SafeLoader


@aenum.unique
class Format(aenum.Enum):
    pass


def register_format(x):
    aenum.extend_enum(Format, x, x.lower())


parser_by_format = {}


def register_parser(format: Format, parser) -> None:
    parser_by_format[format.value] = parser


format_by_suffix = {}


def register_file_formats(format: Format, suffixes: List[AnyStr]) -> None:
    for suffix in suffixes:
        format_by_suffix[suffix] = format


def format_for_filename(filename) -> Format:
    """Chooses a format by suffix. Unknown suffixes are read as properties."""
    _, suffix = os.path.splitext(filename)
    return format_by_suffix.get(suffix.lower(), Format.Properties)


def format_for_url(url: AnyStr) -> Format:
    return format_for_filename(urllib.parse.urlsplit(url).path)


def parser_for_format(format: Format):
    return parser_by_format[format.value]


def string_from_bytes(x: bytes, encoding='utf8') -> AnyStr:
    try:
        return x.decode(encoding)
    except Exception as e:
        raise LoadFailure("could not decode source as %s" % encoding) from e


def props_from_properties(x: bytes) -> Dict[str, str]:
    """Parses Java .properties text, escapes and continuations included.

    Later duplicates win, as in Java.
    """
    p = jproperties.Properties()
    try:
        p.load(x, encoding='utf8')
    except Exception as e:
        raise LoadFailure("could not parse properties") from e
    return {k: p[k].data for k in p}


def props_from_ini(x: bytes) -> Dict[str, str]:
    c = configparser.ConfigParser(interpolation=None)
    c.optionxform = str
    try:
        c.read_string(string_from_bytes(x))
    except configparser.Error as e:
        raise LoadFailure("could not parse ini") from e
    props = {}
    for section in c.sections():
        for item, value in c[section].items():
            props["%s.%s" % (section, item)] = value
    return props


def obj_from_json(x: AnyStr) -> Any:
    try:
        return json.loads(x)
    except Exception as e:
        raise LoadFailure("could not parse json") from e


def obj_from_toml(x: AnyStr) -> Any:
    try:
        return toml.loads(x)
    except Exception as e:
        raise LoadFailure("could not parse toml") from e


def obj_from_yaml(x: AnyStr) -> Any:
    try:
        return yaml.load(x, Loader=SafeLoader)
    except Exception as e:
        raise LoadFailure("could not parse yaml") from e


def scalar_str(v) -> AnyStr:
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def flatten(obj) -> Dict[str, str]:
    """Flattens a parsed document into dotted keys.

    Lists of scalars become a single CSV value. Lists holding objects,
    other lists or strings with commas in them are indexed instead. Nulls are dropped, and an empty
    document gives an empty map.
    """
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise LoadFailure("document root must be an object, not %s" % type(obj).__name__)
    props = {}
    _flatten_into(props, "", obj)
    return props


def _flatten_into(props, prefix, v):
    if v is None:
        return
    if isinstance(v, dict):
        for k, sub in v.items():
            _flatten_into(props, str(k) if not prefix else "%s.%s" % (prefix, k), sub)
    elif isinstance(v, list):
        if any(isinstance(x, (dict, list)) or (isinstance(x, str) and "," in x) for x in v):
            for i, sub in enumerate(v):
                _flatten_into(props, "%s.%d" % (prefix, i), sub)
        else:
            props[prefix] = ", ".join(scalar_str(x) for x in v if x is not None)
    else:
        props[prefix] = scalar_str(v)


register_format("Properties")
register_parser(Format.Properties, props_from_properties)
register_file_formats(Format.Properties, [".prop", ".props", ".properties"])

register_format("Ini")
register_parser(Format.Ini, props_from_ini)
register_file_formats(Format.Ini, [".ini"])

register_format("Json")
register_parser(
    Format.Json,
    lambda x: flatten(obj_from_json(string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Json, [".json"])

register_format("Toml")
register_parser(
    Format.Toml,
    lambda x: flatten(obj_from_toml(string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Toml, [".toml"])

register_format("Yaml")
register_parser(
    Format.Yaml,
    lambda x: flatten(obj_from_yaml(string_from_bytes(x, encoding='utf8')))
)
register_file_formats(Format.Yaml, [".yaml", ".yml"])
