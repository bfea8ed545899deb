#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 17:22:51 krylon>
#
# /data/code/python/torrentrss/tests/test_config.py
# created on 17. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.test_config

(c) 2026 Benjamin Walkenhorst
"""

import os
import shutil
import unittest
from datetime import datetime
from pathlib import Path
from typing import Final

from torrentrss import common, config
from torrentrss.config import Config, ConfigError

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_config_%Y%m%d_%H%M%S"))

sample: Final[str] = """
base_download_dir = "{base}"

[transmission]
url = "http://localhost:9091/transmission/rpc"
username = "user"
{password}

[[rss_feeds]]
title = "Shows"
url = "https://example.org/shows.rss"

[[rss_feeds.rules]]
filter = "S01"
download_dir = "shows/season1"
labels = ["tv"]

[[rss_feeds.rules]]
filter = "S01 1080p"
download_dir = "shows/hd"

[[rss_feeds]]
title = "Movies"
url = "https://example.org/movies.rss"
rules = []
"""


class TestConfig(unittest.TestCase):
    """Test loading the configuration file."""

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        shutil.rmtree(test_dir, ignore_errors=True)

    def write(self, text: str, name: str = "config.toml") -> Path:
        """Write a config file into the test directory."""
        path = Path(test_dir, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        return path

    def base(self) -> Path:
        """Return the download directory for the tests."""
        return Path(test_dir, "downloads")

    def test_01_load(self) -> None:
        """Load a complete configuration."""
        self.write(sample.format(base=self.base(), password='password = "secret"'))
        cfg: Config = config.load()

        self.assertEqual(cfg.base_download_dir, self.base())
        self.assertEqual(cfg.transmission.password, "secret")
        self.assertEqual(cfg.db_path, common.path.db)
        self.assertEqual([f.name for f in cfg.feeds], ["Shows", "Movies"])

        rules = cfg.feeds[0].rules
        self.assertEqual([r.filter for r in rules], ["S01", "S01 1080p"])
        self.assertEqual(rules[0].download_dir, Path("shows/season1"))
        self.assertEqual(rules[0].labels, ("tv",))
        self.assertEqual(rules[1].labels, ())
        self.assertEqual(cfg.feeds[1].rules, ())

    def test_02_dirs_created(self) -> None:
        """The download directories of all Rules are created."""
        self.write(sample.format(base=self.base(), password='password = "secret"'))
        config.load()
        self.assertTrue(self.base().joinpath("shows", "season1").is_dir())
        self.assertTrue(self.base().joinpath("shows", "hd").is_dir())

    def test_03_password_file(self) -> None:
        """The password can be read from a file."""
        pfile = self.write("  hunter2\n", "password")
        path = self.write(sample.format(base=self.base(),
                                        password=f'password_file = "{pfile}"'),
                          "pwfile.toml")
        cfg = config.load(path)
        self.assertEqual(cfg.transmission.password, "hunter2")

    def test_04_missing_password(self) -> None:
        """Without password or password_file, the config is invalid."""
        path = self.write(sample.format(base=self.base(), password=""), "nopw.toml")
        with self.assertRaises(ConfigError):
            config.load(path)

    def test_05_missing_file(self) -> None:
        """A missing config file is an error."""
        with self.assertRaises(ConfigError):
            config.load(Path(test_dir, "does-not-exist.toml"))

    def test_06_syntax(self) -> None:
        """A config file that is not valid TOML is an error."""
        path = self.write("base_download_dir = \n[[[", "broken.toml")
        with self.assertRaises(ConfigError):
            config.load(path)

    def test_07_missing_key(self) -> None:
        """Required keys must be present."""
        path = self.write('base_download_dir = "/tmp"\n', "nokey.toml")
        with self.assertRaises(ConfigError):
            config.load(path)

    def test_08_persistence(self) -> None:
        """The database location can be configured."""
        text = sample.format(base=self.base(), password='password = "secret"') + \
            f'\n[persistence]\npath = "{test_dir}/elsewhere.lmdb"\n'
        cfg = config.load(self.write(text, "persist.toml"))
        self.assertEqual(cfg.db_path, Path(test_dir, "elsewhere.lmdb"))

    def test_09_bad_dir(self) -> None:
        """Rules whose directory cannot be created are dropped."""
        blocker = self.write("not a directory", "blocker")
        text = f"""
base_download_dir = "{blocker}"

[transmission]
url = "http://localhost:9091/transmission/rpc"
username = "user"
password = "secret"

[[rss_feeds]]
title = "Broken"
url = "https://example.org/broken.rss"

[[rss_feeds.rules]]
filter = "anything"
download_dir = "sub"
"""
        with self.assertLogs(f"{common.AppName}.config", level="ERROR"):
            cfg = config.load(self.write(text, "baddir.toml"))
        self.assertEqual(cfg.feeds[0].rules, ())

    def rule_config(self, rule: str) -> str:
        """Return a config with a single Feed that has a single Rule."""
        return f"""
base_download_dir = "{self.base()}"

[transmission]
url = "http://localhost:9091/transmission/rpc"
username = "user"
password = "secret"

[[rss_feeds]]
title = "Shows"
url = "https://example.org/shows.rss"

[[rss_feeds.rules]]
download_dir = "shows"
{rule}
"""

    def test_10_labels_type(self) -> None:
        """labels must be a list of strings."""
        for i, bad in enumerate(['labels = "tv"', 'labels = ["tv", 5]']):
            path = self.write(self.rule_config(f'filter = "S01"\n{bad}'), f"labels{i}.toml")
            with self.subTest(labels=bad):
                with self.assertRaises(ConfigError):
                    config.load(path)

    def test_11_filter_type(self) -> None:
        """filter must be a string."""
        path = self.write(self.rule_config("filter = 5"), "filter.toml")
        with self.assertRaises(ConfigError):
            config.load(path)


# Local Variables: #
# python-indent: 4 #
# End: #
