import pathlib

import pytest

from propconfig import configs
from propconfig import formats


DATA_DIR = pathlib.Path(__file__).resolve().parent / "data"

TEST_CONFIG = DATA_DIR / "test_config.properties"


def load_test_map():
    return configs.map_of(formats.props_from_properties(TEST_CONFIG.read_bytes()))


def is_expected_get(config, key, convert, res):
    if isinstance(res, type) and issubclass(res, Exception):
        with pytest.raises(res):
            _ = config.get(key, convert)
        return True
    else:
        return config.get(key, convert) == res
