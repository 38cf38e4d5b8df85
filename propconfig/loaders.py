"""Resolving configuration locations and loading them into ConfigMaps.

A location is a filesystem path, or a file, http or https URL. Loading
goes resolve -> fetch -> parse, and any failure along the way is raised
as a ConfigProfileError subclass with the original error chained.
Nothing is retried and nothing is cached between calls.

"""

import contextlib
import logging
import os
import pathlib
import re
import urllib.parse
import urllib.request
from typing import AnyStr
from typing import Optional

import requests

from propconfig import config
from propconfig import exceptions
from propconfig import formats


logger = logging.getLogger(__name__)


DEFAULT_PROFILE_ENVAR = "CONFIG_PROFILE"

SUPPORTED_SCHEMES = frozenset(["file", "http", "https"])

# Requires two scheme characters so Windows drive letters read as paths.
_scheme_ptrn = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")


def path_to_url(path) -> AnyStr:
    try:
        return pathlib.Path(path).absolute().as_uri()
    except ValueError as e:
        raise exceptions.ConfigProfileError("could not convert path %r to URL" % str(path)) from e


def url_to_path(url: AnyStr) -> pathlib.Path:
    parts = urllib.parse.urlsplit(url)
    if parts.netloc and parts.netloc != "localhost":
        raise exceptions.ConfigProfileError("file URL %r names a remote host" % url)
    return pathlib.Path(urllib.request.url2pathname(parts.path))


def resolve(where) -> AnyStr:
    """Turns a path or URL string into a URL with a supported scheme."""
    if isinstance(where, os.PathLike):
        return path_to_url(where)
    if not isinstance(where, str) or not where.strip():
        raise exceptions.ConfigProfileError("config location %r is not a path or URL" % (where,))
    if not _scheme_ptrn.match(where):
        url = path_to_url(where)
        logger.debug("Resolved config path %s to %s", where, url)
        return url
    try:
        parts = urllib.parse.urlsplit(where)
    except ValueError as e:
        raise exceptions.ConfigProfileError("config URL %r is not a valid URL" % where) from e
    scheme = parts.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise exceptions.ConfigProfileError("unsupported protocol %r for config URL %r" % (scheme, where))
    if scheme != "file" and not parts.netloc:
        raise exceptions.ConfigProfileError("config URL %r has no host" % where)
    return where


class AbstractFetcher:
    """Fetchers obtain the raw bytes behind a URL."""
    @contextlib.contextmanager
    def load(self, url):
        raise NotImplementedError

    def validate(self, url):
        raise NotImplementedError


def simple_reader(filename):
    with open(filename, 'rb') as f:
        return f.read()


class FileFetcher(AbstractFetcher):
    def __init__(self, reader=simple_reader):
        self.reader = reader or simple_reader

    @contextlib.contextmanager
    def load(self, url):
        filename = url_to_path(url)
        try:
            data = self.reader(filename)
        except FileNotFoundError as e:
            raise exceptions.DataSourceMissing("config file %s does not exist" % filename) from e
        except OSError as e:
            raise exceptions.FetchFailure("could not read config file %s" % filename) from e
        yield data

    def validate(self, url):
        filename = url_to_path(url)
        if not filename.exists():
            raise exceptions.DataSourceMissing("config file %s does not exist" % filename)
        if not filename.is_file():
            raise exceptions.DataSourceMissing("config path %s is not a regular file" % filename)


class HttpFetcher(AbstractFetcher):
    """Fetches over http(s) with requests.

    Without an injected session the module-level requests calls are used,
    so no connection state survives a call.
    """
    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session

    def get_session(self):
        if self._session is not None:
            return self._session
        return requests

    @contextlib.contextmanager
    def load(self, url):
        try:
            resp = self.get_session().get(url)
        except requests.RequestException as e:
            raise exceptions.FetchFailure("could not read config at %s" % url) from e
        with resp:
            if resp.status_code != 200:
                raise exceptions.FetchFailure("status code %d from config URL %s" % (resp.status_code, url))
            yield resp.content

    def validate(self, url):
        try:
            resp = self.get_session().head(url, allow_redirects=True)
        except requests.RequestException as e:
            raise exceptions.FetchFailure("could not reach config at %s" % url) from e
        with resp:
            if resp.status_code != 200:
                raise exceptions.FetchFailure("status code %d from config URL %s" % (resp.status_code, url))


class ConfigReader:
    """Reads ConfigMaps from paths and URLs."""

    def __init__(self, session: Optional[requests.Session] = None, file_fetcher=None):
        http_fetcher = HttpFetcher(session)
        self.fetcher_by_scheme = {
            "file": file_fetcher or FileFetcher(),
            "http": http_fetcher,
            "https": http_fetcher,
        }

    def read(self, where, format: Optional[formats.Format] = None) -> config.ConfigMap:
        """Reads a path (str or PathLike) or a file/http/https URL string."""
        return self.read_url(resolve(where), format=format)

    def read_path(self, path, format: Optional[formats.Format] = None) -> config.ConfigMap:
        return self.read_url(path_to_url(path), format=format)

    def read_url(self, url: AnyStr, format: Optional[formats.Format] = None) -> config.ConfigMap:
        fetcher = self.fetcher_for(url)
        if format is None:
            format = formats.format_for_url(url)
        parser = formats.parser_for_format(format)
        with fetcher.load(url) as data:
            props = parser(data)
        logger.info("Read %d properties from %s", len(props), url)
        return config.ConfigMap(props)

    def read_from_env(self, envar: AnyStr = DEFAULT_PROFILE_ENVAR, format: Optional[formats.Format] = None) -> config.ConfigMap:
        """Reads the location named by an environment variable."""
        where = os.environ.get(envar)
        if config.is_blank(where):
            raise exceptions.ConfigProfileError("environment variable %s does not name a config location" % envar)
        logger.info("Reading config named by %s", envar)
        return self.read(where, format=format)

    def validate(self, where) -> AnyStr:
        """Checks that where resolves and is reachable without reading it."""
        url = resolve(where)
        self.fetcher_for(url).validate(url)
        return url

    def fetcher_for(self, url: AnyStr) -> AbstractFetcher:
        try:
            scheme = urllib.parse.urlsplit(url).scheme.lower()
        except ValueError as e:
            raise exceptions.ConfigProfileError("config URL %r is not a valid URL" % url) from e
        if scheme not in self.fetcher_by_scheme:
            raise exceptions.ConfigProfileError("unsupported protocol %r for config URL %r" % (scheme, url))
        return self.fetcher_by_scheme[scheme]
