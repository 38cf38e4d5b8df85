"""Typed access to .properties-style configuration.

    import propconfig

    cfg = propconfig.reader().read("https://example.org/app.properties")
    port = cfg.get_int("server.port", default=8080)
    db = cfg.subset_by_key_prefix("db.")

"""

from propconfig import converters
from propconfig.config import ConfigMap
from propconfig.config import NoDefault
from propconfig.configs import empty_map
from propconfig.configs import map_of
from propconfig.configs import reader
from propconfig.exceptions import ConfigError
from propconfig.exceptions import ConfigProfileError
from propconfig.exceptions import DataSourceMissing
from propconfig.exceptions import FetchFailure
from propconfig.exceptions import KeyMissingError
from propconfig.exceptions import LoadFailure
from propconfig.exceptions import ValueConversionError
from propconfig.formats import Format
from propconfig.loaders import ConfigReader
