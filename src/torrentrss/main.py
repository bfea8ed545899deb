#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-19 11:12:58 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/main.py
# created on 13. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.main

(c) 2026 Benjamin Walkenhorst

torrentrss performs a single run and exits, so it is meant to be started
periodically, by cron or a systemd timer.
"""


import argparse
import asyncio
import logging
import pathlib
import sys

from torrentrss import common, config
from torrentrss.config import Config, ConfigError
from torrentrss.engine import Engine, RunReport
from torrentrss.feed import FeedFetcher
from torrentrss.store import (HistoryStore, Namespace, RetryStore, Store,
                              StoreError)
from torrentrss.submit import Submitter
from torrentrss.transmission import TransmissionClient


async def run_once(cfg: Config, history: HistoryStore, retry: RetryStore) -> RunReport:
    """Build an Engine from the configuration and perform one run."""
    fetcher = FeedFetcher(cfg.base_download_dir, history, retry)
    submitter = Submitter(TransmissionClient(cfg.transmission), history)
    eng: Engine = Engine(cfg.feeds, fetcher, submitter, retry)
    try:
        return await eng.run()
    finally:
        await eng.close()


def show_queue(retry: RetryStore) -> None:
    """Print the Submissions waiting in the retry queue."""
    pending = retry.enumerate()
    for link, sub in pending.items():
        print(f"{sub.title}\n\t{link}\n\t-> {sub.download_dir}")
    print(f"{len(pending)} Submissions waiting to be retried.")


def forget(retry: RetryStore, link: str) -> bool:
    """Drop link from the retry queue. Return False if it was not queued."""
    log: logging.Logger = common.get_logger("main")
    if not retry.contains(link):
        log.warning("%s is not in the retry queue", link)
        return False
    retry.remove(link)
    log.info("Removed %s from the retry queue", link)
    return True


def main() -> None:
    """Run the torrentrss application."""
    argp: argparse.ArgumentParser = argparse.ArgumentParser()
    argp.add_argument("-b", "--basedir",
                      type=pathlib.Path,
                      default=common.path.base(),
                      help="The directory to store application-specific files in")
    argp.add_argument("-c", "--config",
                      type=pathlib.Path,
                      help="The configuration file (default: config.toml in basedir)")
    argp.add_argument("-d", "--debug",
                      action="store_true",
                      help="Emit debug messages")
    argp.add_argument("-q", "--queue",
                      action="store_true",
                      help="List the Submissions waiting to be retried and exit")
    argp.add_argument("-f", "--forget",
                      metavar="LINK",
                      help="Remove LINK from the retry queue and exit")

    args = argp.parse_args()

    common.set_basedir(args.basedir)
    common.set_debug(args.debug)

    lg: logging.Logger = common.get_logger("main")

    try:
        cfg: Config = config.load(args.config)
        store: Store = Store(cfg.db_path)
    except (ConfigError, StoreError) as err:
        lg.error("%s", err)
        sys.exit(1)

    try:
        history = HistoryStore(store.get_db(Namespace.History))
        retry = RetryStore(store.get_db(Namespace.Retry))

        if args.queue:
            show_queue(retry)
        elif args.forget is not None:
            forget(retry, args.forget)
        else:
            asyncio.run(run_once(cfg, history, retry))
    except StoreError as err:
        lg.error("%s", err)
        sys.exit(1)
    finally:
        store.close()


if __name__ == '__main__':
    main()


# Local Variables: #
# python-indent: 4 #
# End: #
