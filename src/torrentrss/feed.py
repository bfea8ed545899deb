#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-19 10:27:50 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/feed.py
# created on 11. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.feed

(c) 2026 Benjamin Walkenhorst

Download RSS/Atom feeds and turn their entries into Submissions.
"""


import asyncio
import logging
from pathlib import Path
from typing import Any, Final, Iterator, Optional

import fastfeedparser as ffp  # type: ignore # pylint: disable-msg=E0401
import httpx

from torrentrss import common, rules
from torrentrss.common import TorrentRSSError
from torrentrss.model import Candidate, Feed, Submission
from torrentrss.store import HistoryStore, RetryStore

TIMEOUT: Final[float] = 5.0
torrent_type: Final[str] = "application/x-bittorrent"


class FetchError(TorrentRSSError):
    """Base class for errors that occur while getting a feed."""


class TransportError(FetchError):
    """The feed could not be downloaded."""


class FetchTimeout(FetchError):
    """Downloading the feed took too long."""


class DecodeError(FetchError):
    """The feed could not be parsed."""


def _enclosure(entry: Any) -> Optional[str]:
    """Return the URL of the entry's torrent enclosure, if it has one."""
    for enc in entry.get("enclosures") or []:
        if enc.get("type") == torrent_type:
            url = enc.get("url") or enc.get("href")
            if url:
                return url
    # Atom feeds carry enclosures as links
    for lnk in entry.get("links") or []:
        if lnk.get("rel") == "enclosure" and lnk.get("type") == torrent_type:
            if lnk.get("href"):
                return lnk["href"]
    return None


def extract(parsed: Any, log: Optional[logging.Logger] = None) -> Iterator[Candidate]:
    """Yield the link and title of every usable entry in a parsed feed.

    A torrent enclosure is preferred over the entry's link. Entries that
    lack either a link or a title are skipped with a warning.
    """
    if log is None:
        log = common.get_logger("extract")

    for entry in parsed.get("entries") or []:
        link: Optional[str] = _enclosure(entry) or entry.get("link") or None
        title: Optional[str] = entry.get("title") or None

        match (link, title):
            case (str(), str()):
                yield Candidate(link, title)
            case (None, str()):
                log.warning("No link for '%s'", title)
            case (str(), None):
                log.warning("No title for '%s'", link)
            case _:
                log.warning("Skipping entry without link or title")


class FeedFetcher:
    """FeedFetcher gets a Feed and finds the new Items that match one of its Rules."""

    __slots__ = [
        "log",
        "base_dir",
        "history",
        "retry",
        "client",
        "timeout",
    ]

    log: logging.Logger
    base_dir: Path
    history: HistoryStore
    retry: RetryStore
    client: httpx.AsyncClient
    timeout: float

    def __init__(self,
                 base_dir: Path,
                 history: HistoryStore,
                 retry: RetryStore,
                 client: Optional[httpx.AsyncClient] = None,
                 timeout: float = TIMEOUT) -> None:
        self.log = common.get_logger("fetcher")
        self.base_dir = base_dir
        self.history = history
        self.retry = retry
        self.timeout = timeout
        if client is None:
            client = httpx.AsyncClient(
                headers={"User-Agent": f"{common.AppName}/{common.AppVersion}"},
                follow_redirects=True,
                timeout=None,
            )
        self.client = client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _download(self, url: str) -> bytes:
        try:
            res: httpx.Response = await self.client.get(url)
            res.raise_for_status()
        except httpx.TimeoutException as err:
            raise FetchTimeout(str(err)) from err
        except httpx.HTTPError as err:
            raise TransportError(f"{err.__class__.__name__}: {err}") from err
        return res.content

    def decode(self, raw: bytes) -> Any:
        """Parse the raw feed. Raises DecodeError."""
        try:
            return ffp.parse(raw)
        except Exception as err:  # pylint: disable-msg=W0718
            raise DecodeError(f"{err.__class__.__name__}: {err}") from err

    def is_known(self, link: str) -> bool:
        """Return True if link has been submitted already or is waiting for a retry."""
        return self.history.contains(link) or self.retry.contains(link)

    async def _fetch(self, feed: Feed) -> list[Submission]:
        try:
            raw: bytes = await asyncio.wait_for(self._download(feed.url), self.timeout)
        except TimeoutError as err:
            raise FetchTimeout(f"no response after {self.timeout} seconds") from err

        parsed = self.decode(raw)

        subs: list[Submission] = []
        for link, title in extract(parsed, self.log):
            if self.is_known(link):
                continue

            res = rules.match(title, feed.rules)
            if res is None:
                continue

            folder, labels = res
            self.log.info("'%s' matches a rule of %s, will download to %s",
                          title,
                          feed.name,
                          folder)
            subs.append(Submission(
                link=link,
                title=title,
                download_dir=self.base_dir.joinpath(folder),
                labels=labels,
            ))

        return subs

    async def fetch(self, feed: Feed) -> list[Submission]:
        """Fetch a Feed and return the Submissions for its new, matching Items.

        Errors are logged and result in an empty list, they do not affect
        other Feeds.
        """
        self.log.info("Processing feed %s", feed.name)
        try:
            subs = await self._fetch(feed)
        except FetchTimeout as err:
            self.log.error("Connection timeout fetching feed %s (%s): %s",
                           feed.name,
                           feed.url,
                           err)
            return []
        except FetchError as err:
            self.log.error("%s fetching feed %s (%s): %s",
                           err.__class__.__name__,
                           feed.name,
                           feed.url,
                           err)
            return []

        self.log.debug("Feed %s yielded %d new Submissions", feed.name, len(subs))
        return subs


# Local Variables: #
# python-indent: 4 #
# End: #
