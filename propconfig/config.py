"""Immutable, typed view over a flat string-to-string property map."""

import collections.abc
import logging
import re
import types
from typing import Any
from typing import AnyStr
from typing import Callable
from typing import NamedTuple
from typing import Optional

from propconfig import converters
from propconfig import exceptions


logger = logging.getLogger(__name__)


class NoDefault:
    pass


class Response(NamedTuple):
    is_found: bool
    value: Optional[AnyStr]

    @classmethod
    def found(cls, value):
        return cls(is_found=True, value=value)


Response.not_found = Response(is_found=False, value=None)


def is_blank(value: Optional[AnyStr]) -> bool:
    return value is None or not value.strip()


class ConfigMap(collections.abc.Mapping):
    """A read-only property map with typed getters.

    Every getter follows the same resolution policy:

    * a present, non-blank value is converted, and any failure raises
      ValueConversionError, even if a default was supplied;
    * a missing or blank value falls back to the default, if there is one;
    * otherwise KeyMissingError is raised.

    Subsetting returns a new map and never touches this one. Note that
    get() takes a converter, unlike dict.get(); use raw_map() for plain
    dict access.
    """

    def __init__(self, props=None):
        self._props = {}
        for k, v in (props or {}).items():
            if v is None:
                continue
            self._props[str(k)] = str(v)

    def __getitem__(self, key):
        return self._props[key]

    def __iter__(self):
        return iter(self._props)

    def __len__(self):
        return len(self._props)

    def __repr__(self):
        return "ConfigMap(%r)" % (self._props,)

    def _get_item(self, key: AnyStr) -> Response:
        value = self._props.get(key)
        if is_blank(value):
            return Response.not_found
        return Response.found(value)

    def _load_prop(self, key, convert, default_factory, nullable=False):
        resp = self._get_item(key)
        if resp.is_found:
            try:
                v = convert(resp.value)
            except exceptions.ValueConversionError as e:
                raise exceptions.ValueConversionError(
                    resp.value, key=key, exception=e.exception, message=e.message) from e
            except Exception as e:
                raise exceptions.ValueConversionError(resp.value, key=key, exception=e) from e
            logger.info("Setting property %s to %r", key, resp.value)
            return v
        fell_back = default_factory()
        if nullable or fell_back is not None:
            logger.warning("Property %s is not in config. Using default %r", key, fell_back)
            return fell_back
        raise exceptions.KeyMissingError(key)

    @staticmethod
    def _fixed(default):
        if default is NoDefault or default is None:
            return lambda: None
        return lambda: default

    # Subsets

    def subset(self, predicate: Callable[[AnyStr, AnyStr], bool]) -> "ConfigMap":
        return ConfigMap({k: v for k, v in self._props.items() if predicate(k, v)})

    def subset_by_key_prefix(self, prefix: AnyStr) -> "ConfigMap":
        return self.subset(lambda k, v: k.startswith(prefix))

    def subset_by_regex(self, pattern) -> "ConfigMap":
        ptrn = re.compile(pattern)
        return self.subset(lambda k, v: ptrn.fullmatch(k) is not None)

    # Generic getters

    def get(self, key: AnyStr, convert: Callable = converters.to_str, default: Any = NoDefault) -> Any:
        """Gets key converted by convert, falling back to default if it's missing."""
        return self._load_prop(key, convert, self._fixed(default))

    def get_optional(self, key: AnyStr, convert: Callable = converters.to_str) -> Optional[Any]:
        """Gets key converted by convert, or None if it's missing."""
        return self._load_prop(key, convert, lambda: None, nullable=True)

    def get_lazy(self, key: AnyStr, convert: Callable, default_factory: Callable[[], Any]) -> Optional[Any]:
        """Like get(), but only calls default_factory when the key is missing.

        The factory may return None, in which case so does this.
        """
        return self._load_prop(key, convert, default_factory, nullable=True)

    def get_list(self, key: AnyStr, convert: Callable = converters.to_str, default: Any = NoDefault) -> list:
        if isinstance(default, str):
            default = [default]
        elif default is not NoDefault and default is not None:
            default = list(default)
        return self._load_prop(
            key,
            lambda x: converters.split_csv(x, convert),
            self._fixed(default),
        )

    def get_list_lazy(self, key: AnyStr, convert: Callable, default_factory: Callable[[], Any]) -> Optional[list]:
        return self._load_prop(
            key,
            lambda x: converters.split_csv(x, convert),
            default_factory,
            nullable=True,
        )

    def get_set(self, key: AnyStr, convert: Callable = converters.to_str, default: Any = NoDefault) -> frozenset:
        return frozenset(self.get_list(key, convert, default))

    # Scalars

    def get_str(self, key, default=NoDefault) -> str:
        return self.get(key, converters.to_str, default)

    def get_optional_str(self, key) -> Optional[str]:
        return self.get_optional(key, converters.to_str)

    def get_int(self, key, default=NoDefault) -> int:
        return self.get(key, converters.to_int, default)

    def get_optional_int(self, key) -> Optional[int]:
        return self.get_optional(key, converters.to_int)

    def get_long(self, key, default=NoDefault) -> int:
        return self.get(key, converters.to_long, default)

    def get_optional_long(self, key) -> Optional[int]:
        return self.get_optional(key, converters.to_long)

    def get_double(self, key, default=NoDefault) -> float:
        return self.get(key, converters.to_double, default)

    def get_optional_double(self, key) -> Optional[float]:
        return self.get_optional(key, converters.to_double)

    def get_bool(self, key, default=NoDefault) -> bool:
        return self.get(key, converters.to_bool, default)

    def get_optional_bool(self, key) -> Optional[bool]:
        return self.get_optional(key, converters.to_bool)

    # Paths

    def get_path(self, key, default=NoDefault):
        return self.get(key, converters.to_path, default)

    def get_optional_path(self, key):
        return self.get_optional(key, converters.to_path)

    def get_extant_file(self, key, default=NoDefault):
        return self.get(key, converters.to_extant_file, default)

    def get_optional_extant_file(self, key):
        return self.get_optional(key, converters.to_extant_file)

    def get_nonextant_path(self, key, default=NoDefault):
        return self.get(key, converters.to_nonextant_path, default)

    def get_optional_nonextant_path(self, key):
        return self.get_optional(key, converters.to_nonextant_path)

    def get_directory(self, key, default=NoDefault):
        return self.get(key, converters.to_directory, default)

    def get_optional_directory(self, key):
        return self.get_optional(key, converters.to_directory)

    def get_extant_directory(self, key, default=NoDefault):
        return self.get(key, converters.to_extant_directory, default)

    def get_optional_extant_directory(self, key):
        return self.get_optional(key, converters.to_extant_directory)

    # URIs

    def get_uri(self, key):
        return self.get(key, converters.to_uri)

    def get_optional_uri(self, key):
        return self.get_optional(key, converters.to_uri)

    def get_url(self, key):
        return self.get(key, converters.to_url)

    def get_optional_url(self, key):
        return self.get_optional(key, converters.to_url)

    # Arrays and collections. Arrays come back as tuples.

    def get_double_array(self, key, default=NoDefault) -> tuple:
        return tuple(self.get_list(key, converters.to_double, default))

    def get_int_array(self, key, default=NoDefault) -> tuple:
        return tuple(self.get_list(key, converters.to_int, default))

    def get_long_array(self, key, default=NoDefault) -> tuple:
        return tuple(self.get_list(key, converters.to_long, default))

    def get_str_array(self, key, default=NoDefault) -> tuple:
        return tuple(self.get_list(key, converters.to_str, default))

    def get_str_list(self, key, default=NoDefault) -> list:
        return self.get_list(key, converters.to_str, default)

    def get_str_set(self, key, default=NoDefault) -> frozenset:
        return self.get_set(key, converters.to_str, default)

    # Raw access

    def raw_map(self) -> types.MappingProxyType:
        return types.MappingProxyType(self._props)

    def contains_key(self, key) -> bool:
        return key in self._props

    def has(self, key) -> bool:
        return key in self._props

    def entries(self):
        return self._props.items()

    def size(self) -> int:
        return len(self._props)

    def is_empty(self) -> bool:
        return not self._props

    def for_each(self, action: Callable[[AnyStr, AnyStr], Any]) -> None:
        for k, v in self._props.items():
            action(k, v)
