#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 21:14:09 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/submit.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.submit

(c) 2026 Benjamin Walkenhorst
"""


import asyncio
import logging
from typing import Final

from torrentrss import common
from torrentrss.common import TorrentRSSError
from torrentrss.model import Submission
from torrentrss.store import HistoryStore, StoreError
from torrentrss.transmission import (RPCConnectionError, RPCRejected,
                                     TransmissionClient)

TIMEOUT: Final[float] = 5.0


class SubmitError(TorrentRSSError):
    """Base class for errors handing a Submission to Transmission."""


class SubmitConnectionError(SubmitError):
    """Transmission could not be reached."""


class SubmitRejected(SubmitError):
    """Transmission refused to add the torrent."""

    reason: str

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SubmitTimeout(SubmitError):
    """Transmission did not answer in time."""


class Submitter:
    """Submitter hands Submissions to Transmission and records the ones that succeed."""

    __slots__ = [
        "log",
        "client",
        "history",
        "timeout",
    ]

    log: logging.Logger
    client: TransmissionClient
    history: HistoryStore
    timeout: float

    def __init__(self,
                 client: TransmissionClient,
                 history: HistoryStore,
                 timeout: float = TIMEOUT) -> None:
        self.log = common.get_logger("submitter")
        self.client = client
        self.history = history
        self.timeout = timeout

    async def close(self) -> None:
        """Close the connection to Transmission."""
        await self.client.close()

    async def submit(self, sub: Submission) -> None:
        """Add the Submission's torrent to Transmission.

        Raises one of the SubmitError subclasses if that does not work out.
        Whether to try again is up to the caller.
        """
        self.log.debug("Submit %s", sub.string)
        try:
            await asyncio.wait_for(
                self.client.torrent_add(sub.link,
                                        str(sub.download_dir),
                                        sub.labels),
                self.timeout)
        except TimeoutError as err:
            raise SubmitTimeout(f"Timeout while connecting to Transmission for '{sub.title}'") \
                from err
        except RPCConnectionError as err:
            raise SubmitConnectionError(f"Error adding '{sub.title}': {err}") from err
        except RPCRejected as err:
            raise SubmitRejected(err.reason) from err

        self.log.info("Added '%s' to Transmission", sub.title)

        # The torrent has been added at this point, whatever happens to the history.
        try:
            self.history.record(sub.link, sub.title)
        except StoreError as err:
            self.log.error("Failed to save %s into history: %s", sub.link, err)


# Local Variables: #
# python-indent: 4 #
# End: #
