#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-19 11:05:32 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/engine.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.engine

(c) 2026 Benjamin Walkenhorst

Engine performs one complete run: check all Feeds, hand the new matches to
Transmission, then retry everything that is waiting in the retry queue.
"""


import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final

from torrentrss import common
from torrentrss.feed import FeedFetcher
from torrentrss.model import Feed, Submission
from torrentrss.store import RetryStore, StoreError
from torrentrss.submit import SubmitError, Submitter


class State(Enum):
    """State is the phase of a run the Engine is in."""

    Idle = auto()
    Fetching = auto()
    Submitting = auto()
    Retrying = auto()
    Done = auto()


@dataclass(kw_only=True, slots=True)
class RunReport:
    """RunReport counts what happened during a run."""

    feeds: int = 0
    found: int = 0
    submitted: int = 0
    failed: int = 0
    retried: int = 0
    recovered: int = 0
    retry_aborted: bool = False

    @property
    def string(self) -> str:
        """Return a one-line summary of the run."""
        return f"{self.feeds} feeds, {self.found} new matches, " + \
            f"{self.submitted} added, {self.failed} failed, " + \
            f"{self.recovered}/{self.retried} retries succeeded"


class Engine:
    """Engine drives a single run of the pipeline."""

    __slots__ = [
        "log",
        "feeds",
        "fetcher",
        "submitter",
        "retry",
        "state",
    ]

    log: logging.Logger
    feeds: Sequence[Feed]
    fetcher: FeedFetcher
    submitter: Submitter
    retry: RetryStore
    state: State

    def __init__(self,
                 feeds: Sequence[Feed],
                 fetcher: FeedFetcher,
                 submitter: Submitter,
                 retry: RetryStore) -> None:
        self.log = common.get_logger("engine")
        self.feeds = feeds
        self.fetcher = fetcher
        self.submitter = submitter
        self.retry = retry
        self.state = State.Idle

    async def _attempt(self, sub: Submission) -> bool:
        """Try to submit sub, return True if it worked."""
        try:
            await self.submitter.submit(sub)
            return True
        except SubmitError as err:
            self.log.error("%s while adding '%s' (%s): %s",
                           err.__class__.__name__,
                           sub.title,
                           sub.link,
                           err)
            return False
        except Exception as err:  # pylint: disable-msg=W0718
            self.log.error("Unexpected %s while adding '%s' (%s): %s",
                           err.__class__.__name__,
                           sub.title,
                           sub.link,
                           err)
            return False

    async def _fetch_all(self, report: RunReport) -> list[Submission]:
        self.state = State.Fetching
        results = await asyncio.gather(*[self.fetcher.fetch(f) for f in self.feeds],
                                       return_exceptions=True)

        subs: list[Submission] = []
        seen: set[str] = set()
        for feed, res in zip(self.feeds, results):
            if isinstance(res, BaseException):
                self.log.error("Unexpected %s processing feed %s: %s",
                               res.__class__.__name__,
                               feed.name,
                               res)
                continue
            for sub in res:
                # Several feeds may carry the same torrent.
                if sub.link in seen:
                    continue
                seen.add(sub.link)
                subs.append(sub)

        report.feeds = len(self.feeds)
        report.found = len(subs)
        return subs

    async def _submit_all(self, subs: list[Submission], report: RunReport) -> None:
        self.state = State.Submitting
        results: Final[list[bool]] = \
            await asyncio.gather(*[self._attempt(s) for s in subs])

        for sub, ok in zip(subs, results):
            if ok:
                report.submitted += 1
                continue
            report.failed += 1
            try:
                self.retry.record(sub.link, sub)
            except StoreError as err:
                self.log.error("Failed to queue %s for retry: %s", sub.link, err)

    async def _retry_all(self, report: RunReport) -> None:
        self.state = State.Retrying
        try:
            pending: dict[str, Submission] = self.retry.enumerate()
        except StoreError as err:
            self.log.error("Cannot read retry queue, skipping retries for this run: %s", err)
            report.retry_aborted = True
            return

        if len(pending) == 0:
            return

        self.log.info("Retrying %d failed Submissions", len(pending))
        links: Final[list[str]] = list(pending)
        results: Final[list[bool]] = \
            await asyncio.gather(*[self._attempt(pending[x]) for x in links])

        for link, ok in zip(links, results):
            report.retried += 1
            if not ok:
                continue
            report.recovered += 1
            try:
                self.retry.remove(link)
            except StoreError as err:
                self.log.error("Failed to remove %s from retry queue: %s", link, err)

    async def run(self) -> RunReport:
        """Perform one run and return a report of what happened."""
        report: RunReport = RunReport()

        subs = await self._fetch_all(report)
        await self._submit_all(subs, report)
        await self._retry_all(report)

        self.state = State.Done
        self.log.info("Run complete: %s", report.string)
        return report

    async def close(self) -> None:
        """Release the network clients."""
        await self.fetcher.close()
        await self.submitter.close()


# Local Variables: #
# python-indent: 4 #
# End: #
