#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 19:02:41 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/common.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.common

(c) 2026 Benjamin Walkenhorst

Application-wide constants, paths and logging.
"""


import logging
import logging.handlers
import os
import sys
from pathlib import Path
from threading import RLock
from typing import Final, Union

AppName: Final[str] = "torrentrss"
AppVersion: Final[str] = "0.3.1"
Debug: bool = False
TimeFmt: Final[str] = "%Y-%m-%d %H:%M:%S"

LogFmt: Final[str] = "%(asctime)s (%(name)-16s / line %(lineno)-4d) " + \
    "- %(levelname)-8s %(message)s"


class TorrentRSSError(Exception):
    """Base class for application-specific exceptions."""


class Path_:  # pylint: disable-msg=C0103
    """Path_ holds the locations of the files the application uses."""

    __slots__ = ["__base"]

    __base: Path

    def __init__(self, root: Union[str, Path] = "") -> None:
        if root == "":
            root = Path.home().joinpath(".config", AppName)
        self.__base = Path(root)

    def base(self, path: Union[str, Path] = "") -> Path:
        """Get or set the base directory."""
        if path != "":
            self.__base = Path(path)
        return self.__base

    @property
    def config(self) -> Path:
        """Return the path of the configuration file."""
        return self.__base.joinpath("config.toml")

    @property
    def db(self) -> Path:
        """Return the path of the LMDB environment."""
        return self.__base.joinpath("links.lmdb")

    @property
    def log(self) -> Path:
        """Return the path of the log file."""
        return self.__base.joinpath(f"{AppName.lower()}.log")


path: Path_ = Path_()

_lock: Final[RLock] = RLock()
_cache: dict[str, logging.Logger] = {}


def set_basedir(folder: Union[str, Path]) -> None:
    """Set the base directory and make sure it exists."""
    with _lock:
        path.base(folder)
        os.makedirs(path.base(), exist_ok=True)
        # Loggers created earlier still point at the old log file.
        for lg in _cache.values():
            for hdl in list(lg.handlers):
                lg.removeHandler(hdl)
                hdl.close()
        _cache.clear()


def get_logger(name: str, terminal: bool = True) -> logging.Logger:
    """Create and return a logger with the given name."""
    with _lock:
        if name in _cache:
            return _cache[name]

        os.makedirs(path.base(), exist_ok=True)

        log_name: Final[str] = f"{AppName}.{name}"
        log_obj = logging.getLogger(log_name)
        log_obj.setLevel(logging.DEBUG if Debug else logging.INFO)
        log_obj.propagate = False

        fmt: Final[logging.Formatter] = logging.Formatter(LogFmt)

        fh = logging.handlers.RotatingFileHandler(path.log,
                                                  "a",
                                                  (1 << 20),
                                                  3)
        fh.setFormatter(fmt)
        log_obj.addHandler(fh)

        if terminal:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(fmt)
            log_obj.addHandler(ch)

        _cache[name] = log_obj
        return log_obj


def set_debug(flag: bool) -> None:
    """Toggle debug logging, for existing loggers as well as future ones."""
    global Debug  # pylint: disable-msg=W0603
    with _lock:
        Debug = flag
        level: Final[int] = logging.DEBUG if flag else logging.INFO
        for lg in _cache.values():
            lg.setLevel(level)


# Local Variables: #
# python-indent: 4 #
# End: #
