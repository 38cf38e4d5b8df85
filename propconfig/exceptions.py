class ConfigError(Exception):
    """Base class for every error raised by propconfig."""
    pass


class ConfigProfileError(ConfigError):
    """The configuration source could not be resolved, reached or read."""
    pass


class DataSourceMissing(ConfigProfileError):
    pass


class FetchFailure(ConfigProfileError):
    pass


class LoadFailure(ConfigProfileError):
    pass


class KeyMissingError(ConfigError, KeyError):
    """A required key was absent or blank and no default was given."""
    def __init__(self, key, *args):
        super().__init__(key, *args)
        self.key = key

    def __str__(self):
        return "missing property {}".format(self.key)


class ValueConversionError(ConfigError, ValueError):
    """Propagates an error generated while converting a retrieved value.

    Converters raise it with only the raw value filled in. The config map
    re-raises it with the key attached, wrapping whatever the converter
    raised.
    """
    def __init__(self, raw_value, key=None, exception=None, message=None):
        super().__init__(raw_value, key, exception, message)
        self.key = key
        self.raw_value = raw_value
        self.exception = exception
        self.message = message

    def __str__(self):
        msg = "could not parse value {!r}".format(self.raw_value)
        if self.key is not None:
            msg += " for key {}".format(self.key)
        if self.message:
            msg += ": {}".format(self.message)
        elif self.exception is not None:
            msg += ": {}".format(self.exception)
        return msg
