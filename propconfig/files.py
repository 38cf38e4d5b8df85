"""Filesystem helpers: finding files by name and reading id lists.

These don't touch the config layer.
"""

import fnmatch
import logging
import os
import re
from typing import AnyStr
from typing import Iterable
from typing import List


logger = logging.getLogger(__name__)


DIRS_TO_SKIP = frozenset(["CVS", ".git"])


class FileFinder:
    """Collects names of files under a tree that match a pattern.

    The pattern is either "glob:<glob>" or "regex:<regex>" and is matched
    against the file name only, never the full path. Version control
    directories are not descended into.
    """
    def __init__(self, pattern: AnyStr):
        if pattern.startswith("glob:"):
            glob = pattern[len("glob:"):]
            self.matcher = lambda name: fnmatch.fnmatchcase(name, glob)
        elif pattern.startswith("regex:"):
            ptrn = re.compile(pattern[len("regex:"):])
            self.matcher = lambda name: ptrn.fullmatch(name) is not None
        else:
            raise ValueError("pattern must start with 'glob:' or 'regex:'")
        self.matching_files = []

    def walk(self, root) -> "FileFinder":
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._walk_failed):
            dirnames[:] = [d for d in dirnames if d not in DIRS_TO_SKIP]
            for name in filenames:
                if self.matcher(name):
                    self.matching_files.append(name)
        return self

    @staticmethod
    def _walk_failed(e: OSError):
        logger.warning("Could not get info for file %s. Problem: %s", e.filename, e.strerror)

    def unique_matching_files(self) -> List[str]:
        return sorted(set(self.matching_files))


def find_files(root, pattern: AnyStr) -> List[str]:
    """Sorted, distinct names of files under root matching pattern."""
    if not os.path.exists(root):
        raise FileNotFoundError("input dir %s does not exist" % root)
    if not os.path.isdir(root):
        raise NotADirectoryError("input dir %s is not a directory" % root)
    return FileFinder(pattern).walk(root).unique_matching_files()


def _case(s, force_upper):
    return s.upper() if force_upper else s.lower()


def chop_extensions(names: Iterable[AnyStr], extension: AnyStr, force_upper: bool) -> List[str]:
    """Strips extension from each name that has it and drops the rest."""
    chopped = set()
    for name in names:
        if name.endswith(extension):
            chopped.add(_case(name[:len(name) - len(extension)], force_upper))
    return sorted(chopped)


def chop_extensions_regex(names: Iterable[AnyStr], regex: AnyStr, force_upper: bool) -> List[str]:
    """Like chop_extensions, but the extension is a regex anchored at the end."""
    if "(" in regex or ")" in regex:
        raise ValueError("regexes that contain parentheses are not supported")
    ptrn = re.compile("^(.*)(%s)$" % regex)
    chopped = set()
    for name in names:
        m = ptrn.match(name)
        if m:
            chopped.add(_case(m.group(1), force_upper))
    return sorted(chopped)


def read_ids_from_file(path, max_to_read: int = 0) -> List[str]:
    """Reads the first whitespace-delimited token of each line, upper-cased.

    Blank lines and lines starting with # are skipped. A positive
    max_to_read stops reading once that many distinct ids are found.
    """
    ids = set()
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if 0 < max_to_read <= len(ids):
                break
            tokens = line.split()
            if not tokens or line.startswith("#"):
                continue
            ids.add(tokens[0].upper())
    return sorted(ids)
