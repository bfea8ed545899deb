#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 17:03:22 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/config.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.config

(c) 2026 Benjamin Walkenhorst

Load the configuration file. A minimal example:

    base_download_dir = "/srv/downloads"

    [transmission]
    url = "http://localhost:9091/transmission/rpc"
    username = "user"
    password_file = "/run/secrets/transmission"

    [[rss_feeds]]
    title = "Shows"
    url = "https://example.org/rss"

    [[rss_feeds.rules]]
    filter = "S01 1080p"
    download_dir = "shows/hd"
    labels = ["tv"]
"""


import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional, Union

from torrentrss import common
from torrentrss.common import TorrentRSSError
from torrentrss.model import Feed, Rule


class ConfigError(TorrentRSSError):
    """ConfigError indicates a missing or invalid configuration file."""


@dataclass(kw_only=True, slots=True, frozen=True)
class Transmission:
    """Transmission holds the address and credentials of the daemon."""

    url: str
    username: str
    password: str


@dataclass(kw_only=True, slots=True, frozen=True)
class Config:
    """Config is the complete, validated configuration."""

    base_download_dir: Path
    db_path: Path
    transmission: Transmission
    feeds: tuple[Feed, ...]


def _require(table: dict[str, Any], key: str, where: str) -> Any:
    try:
        return table[key]
    except KeyError as err:
        raise ConfigError(f"Missing key '{key}' in {where}") from err


def _load_transmission(raw: dict[str, Any]) -> Transmission:
    url: Final[str] = _require(raw, "url", "[transmission]")
    username: Final[str] = _require(raw, "username", "[transmission]")

    match raw:
        case {"password": str(pwd)}:
            password = pwd
        case {"password_file": str(pfile)}:
            try:
                with open(pfile, "r", encoding="utf-8") as fh:
                    password = fh.read().strip()
            except OSError as err:
                raise ConfigError(f"Cannot read password file {pfile}: {err}") from err
        case _:
            raise ConfigError("[transmission] needs either password or password_file")

    return Transmission(url=url, username=username, password=password)


def ensure_exists(folder: Path, log: logging.Logger) -> None:
    """Create the directory if it does not exist yet."""
    if not folder.is_dir():
        log.info("Creating directory %s", folder)
        os.makedirs(folder, exist_ok=True)


def _load_rules(feed: str,
                raw: list[dict[str, Any]],
                base: Path,
                log: logging.Logger) -> list[Rule]:
    rules: list[Rule] = []
    for r in raw:
        where = f"rule of feed {feed}"
        flt = _require(r, "filter", where)
        if not isinstance(flt, str):
            raise ConfigError(f"filter in {where} must be a string, not {flt!r}")

        labels = r.get("labels", [])
        match labels:
            case list() if all(isinstance(x, str) for x in labels):
                pass
            case _:
                raise ConfigError(f"labels of rule '{flt}' in feed {feed} " +
                                  f"must be a list of strings, not {labels!r}")

        rule = Rule(
            filter=flt,
            download_dir=Path(_require(r, "download_dir", where)),
            labels=tuple(labels),
        )
        # Only keep rules with a usable download directory
        try:
            ensure_exists(base.joinpath(rule.download_dir), log)
        except OSError as err:
            log.error("Dropping rule '%s' of feed %s, cannot create %s: %s",
                      rule.filter,
                      feed,
                      rule.download_dir,
                      err)
            continue
        rules.append(rule)
    return rules


def load(path: Optional[Union[str, Path]] = None) -> Config:
    """Read the configuration file. Raises ConfigError if anything is wrong with it."""
    log: Final[logging.Logger] = common.get_logger("config")
    cfg_path: Final[Path] = common.path.config if path is None else Path(path)

    log.debug("Load configuration from %s", cfg_path)

    try:
        with open(cfg_path, "rb") as fh:
            raw = tomllib.load(fh)
    except OSError as err:
        raise ConfigError(f"Failed to open config file {cfg_path}: {err}") from err
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(f"Config file {cfg_path} is invalid: {err}") from err

    try:
        base: Final[Path] = Path(_require(raw, "base_download_dir", "config file"))
        transmission = _load_transmission(_require(raw, "transmission", "config file"))

        db_path: Path = common.path.db
        if "persistence" in raw:
            db_path = Path(_require(raw["persistence"], "path", "[persistence]"))

        feeds: list[Feed] = []
        for f in raw.get("rss_feeds", []):
            name: str = _require(f, "title", "[[rss_feeds]]")
            feed = Feed(
                name=name,
                url=_require(f, "url", f"feed {name}"),
                rules=tuple(_load_rules(name, f.get("rules", []), base, log)),
            )
            feeds.append(feed)
    except (TypeError, AttributeError) as err:
        raise ConfigError(f"Config file {cfg_path} is malformed: {err}") from err

    log.debug("Loaded %d feeds from %s", len(feeds), cfg_path)

    return Config(
        base_download_dir=base,
        db_path=db_path,
        transmission=transmission,
        feeds=tuple(feeds),
    )


# Local Variables: #
# python-indent: 4 #
# End: #
