"""Entry points for getting readers and building maps directly."""

from propconfig import config
from propconfig import loaders


def reader(session=None) -> loaders.ConfigReader:
    return loaders.ConfigReader(session=session)


def empty_map() -> config.ConfigMap:
    return config.ConfigMap({})


def map_of(props) -> config.ConfigMap:
    """Builds a map from any in-memory mapping, e.g. in tests."""
    return config.ConfigMap(props)
