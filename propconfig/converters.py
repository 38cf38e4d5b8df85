"""Converters from raw property strings to typed values.

Every converter takes a single non-blank string and either returns the
typed value or raises ValueConversionError. Deciding what counts as a
missing value is left to the config map, so a converter never sees a
blank string in normal use.

A converter is any callable with this shape, so built-ins work too:

    cfg.get("retries", int)
    cfg.get_list("ratios", converters.to_double)

"""

import os
import pathlib
import re
import urllib.parse
from typing import AnyStr
from typing import Callable
from typing import List
from typing import Optional

from propconfig.exceptions import ValueConversionError


csv_ptrn = re.compile(r",\s*")

_whitespace = re.compile(r"\s")

# Plain ASCII spellings only: no underscores, padding or other digit sets.
_int_ptrn = re.compile(r"[+-]?[0-9]+")
_double_ptrn = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?|[+-]?(NaN|Infinity)")


def split_csv(value: AnyStr, convert: Optional[Callable] = None) -> List:
    """Splits on a comma and any whitespace directly after it."""
    tokens = csv_ptrn.split(value)
    if convert is None:
        return tokens
    return [convert(t) for t in tokens]


def to_str(value: AnyStr) -> AnyStr:
    return value


def to_bool(value: AnyStr) -> bool:
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    raise ValueConversionError(value, message="expected true or false")


def to_int(value: AnyStr) -> int:
    if not _int_ptrn.fullmatch(value):
        raise ValueConversionError(value, message="not an integer")
    return int(value)


# Python ints have no width, but the long getters keep their own name.
to_long = to_int


def to_double(value: AnyStr) -> float:
    if not _double_ptrn.fullmatch(value):
        raise ValueConversionError(value, message="not a decimal number")
    return float(value)


def to_path(value: AnyStr) -> pathlib.Path:
    if "\0" in value:
        raise ValueConversionError(value, message="path contains a NUL byte")
    return pathlib.Path(value)


def to_directory(value: AnyStr) -> pathlib.Path:
    path = to_path(value)
    if path.exists() and not path.is_dir():
        raise ValueConversionError(value, message="path %s exists but is not a directory" % path)
    return path


def to_extant_directory(value: AnyStr) -> pathlib.Path:
    path = to_path(value)
    if not path.exists():
        raise ValueConversionError(value, message="path %s does not exist" % path)
    if not path.is_dir():
        raise ValueConversionError(value, message="path %s exists but is not a directory" % path)
    return path


def to_extant_file(value: AnyStr) -> pathlib.Path:
    path = to_path(value)
    if not path.exists():
        raise ValueConversionError(value, message="file %s does not exist" % path)
    if not path.is_file():
        raise ValueConversionError(value, message="file %s exists but is not a regular file" % path)
    if not os.access(path, os.R_OK):
        raise ValueConversionError(value, message="file %s exists but is not readable" % path)
    return path


def to_nonextant_path(value: AnyStr) -> pathlib.Path:
    path = to_path(value)
    if path.exists():
        raise ValueConversionError(value, message="path %s already exists" % path)
    return path


def to_uri(value: AnyStr) -> urllib.parse.SplitResult:
    if _whitespace.search(value):
        raise ValueConversionError(value, message="URI contains whitespace")
    try:
        uri = urllib.parse.urlsplit(value)
        # Port parsing is lazy in urlsplit, so force it here.
        _ = uri.port
    except ValueError as e:
        raise ValueConversionError(value, exception=e)
    return uri


def to_url(value: AnyStr) -> urllib.parse.SplitResult:
    url = to_uri(value)
    if not url.scheme:
        raise ValueConversionError(value, message="URL has no scheme")
    if url.scheme != "file" and not url.netloc:
        raise ValueConversionError(value, message="URL has no host")
    return url
