#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 20:11:36 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/store.py
# created on 11. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.store

(c) 2026 Benjamin Walkenhorst

Persistent storage for the links we have already handed to Transmission
(the history) and for the Submissions that failed and need to be tried
again (the retry queue). Both live in the same LMDB environment, each in its
own named database.
"""


import hashlib
import logging
import pickle
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Final, Iterator, Optional, Union

import lmdb

from torrentrss import common
from torrentrss.common import TorrentRSSError
from torrentrss.model import Submission


class StoreError(TorrentRSSError):
    """Exception class to indicate errors in the storage layer"""


class TxError(StoreError):
    """TxError indicates an error related to transaction-handling."""


class Namespace(Enum):
    """Namespace identifies one of the databases in the LMDB environment."""

    History = auto()
    Retry = auto()

    @property
    def string(self) -> str:
        """Return the lowercase name of the Namespace constant."""
        return self.name.lower()


@dataclass(kw_only=True, slots=True)
class StoreItem:
    """StoreItem is a value we persist, plus the key it was stored under."""

    key: str
    item: Any
    stored: datetime = field(default_factory=datetime.now)


@dataclass(kw_only=True, slots=True)
class Tx:
    """Tx wraps a database transaction."""

    log: logging.Logger
    tx: lmdb.Transaction
    rw: bool
    max_key: int

    def _raw_key(self, key: str) -> bytes:
        raw: bytes = key.encode()
        # LMDB limits key size (511 bytes by default), magnet links can be longer.
        if len(raw) > self.max_key:
            raw = b"#" + hashlib.sha256(raw).hexdigest().encode()
        return raw

    def __getitem__(self, key: str) -> Optional[Any]:
        val = self.tx.get(self._raw_key(key))
        if val is None:
            return None

        item: StoreItem = pickle.loads(val)
        return item.item

    def __setitem__(self, key: str, val: Any) -> None:
        if not self.rw:
            raise TxError("Cannot change the database in a readonly transaction!")

        item = StoreItem(key=key, item=val)
        raw = pickle.dumps(item)

        self.tx.put(self._raw_key(key), raw, overwrite=True)

    def __delitem__(self, key: str) -> None:
        if not self.rw:
            raise TxError("Cannot change the database in a readonly transaction!")

        if not self.tx.delete(self._raw_key(key)):
            self.log.debug("%s is not in the database, nothing to delete", key)

    def __contains__(self, key: str) -> bool:
        return self.tx.get(self._raw_key(key)) is not None

    def items(self) -> Iterator[StoreItem]:
        """Iterate over all items in the database."""
        cur: lmdb.Cursor = self.tx.cursor()
        for _, val in cur:
            yield pickle.loads(val)


@dataclass(kw_only=True, slots=True)
class StoreDB:
    """StoreDB wraps one named database within the LMDB environment."""

    name: Namespace
    env: lmdb.Environment
    db: 'lmdb._Database' = field(default=None)
    log: logging.Logger = field(init=False)

    def __post_init__(self) -> None:
        self.log = common.get_logger(f"store.{self.name.string}")
        if self.db is None:
            self.log.debug("No database instance was provided, opening one now.")
            self.db = self.env.open_db(self.name.string.encode())

    @contextmanager
    def tx(self, rw: bool = False):
        """Perform a database transaction. Unless rw is True, no changes are permitted.

        Errors from LMDB or from de-serializing a value abort the transaction
        and are raised as StoreError.
        """
        try:
            tx: lmdb.Transaction = self.env.begin(write=rw, db=self.db)
        except lmdb.Error as err:
            raise StoreError(f"Cannot begin transaction on {self.name.string}: {err}") from err

        try:
            yield Tx(log=self.log, tx=tx, rw=rw, max_key=self.env.max_key_size())
        except StoreError:
            tx.abort()
            raise
        except (lmdb.Error, pickle.PickleError, EOFError, AttributeError, ImportError) as err:
            cname: Final[str] = err.__class__.__name__
            self.log.error("Abort transaction on %s due to %s: %s",
                           self.name.string,
                           cname,
                           err)
            tx.abort()
            raise StoreError(f"{cname} in {self.name.string} database: {err}") from err
        except BaseException:
            tx.abort()
            raise
        else:
            try:
                tx.commit()
            except lmdb.Error as err:
                raise StoreError(f"Cannot commit to {self.name.string}: {err}") from err

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""
        with self.tx() as tx:
            return tx[key]

    def put(self, key: str, val: Any) -> None:
        """Store val under key, replacing any previous value."""
        with self.tx(True) as tx:
            tx[key] = val

    def delete(self, key: str) -> None:
        """Remove key from the database."""
        with self.tx(True) as tx:
            del tx[key]

    def contains(self, key: str) -> bool:
        """Return True if the database has a value for key."""
        with self.tx() as tx:
            return key in tx

    def items(self) -> dict[str, Any]:
        """Return a snapshot of the whole database."""
        with self.tx() as tx:
            return {x.key: x.item for x in tx.items()}


class Store:
    """Store is the LMDB environment that holds all of our namespaces."""

    __slots__ = [
        "log",
        "env",
        "path",
    ]

    log: logging.Logger
    env: lmdb.Environment
    path: Path

    def __init__(self, root: Optional[Union[str, Path]] = None) -> None:
        self.log = common.get_logger("store")
        self.path = common.path.db if root is None else Path(root)
        self.log.debug("Open LMDB environment in %s", self.path)
        try:
            self.env = lmdb.Environment(str(self.path),
                                        subdir=True,
                                        map_size=(1 << 30),  # 1 GiB
                                        create=True,
                                        max_dbs=len(Namespace)+2,
                                        )
        except lmdb.Error as err:
            raise StoreError(f"Cannot open store at {self.path}: {err}") from err

    def get_db(self, name: Namespace) -> StoreDB:
        """Return the specified database."""
        self.log.debug("Open %s database.", name.string)
        try:
            db: 'lmdb._Database' = self.env.open_db(name.string.encode())
        except lmdb.Error as err:
            raise StoreError(f"Cannot open database {name.string}: {err}") from err
        return StoreDB(name=name, env=self.env, db=db)

    def close(self) -> None:
        """Close the LMDB environment."""
        self.env.close()


class HistoryStore:
    """HistoryStore is the set of links we have handed to Transmission successfully."""

    __slots__ = ["log", "db"]

    log: logging.Logger
    db: StoreDB

    def __init__(self, db: StoreDB) -> None:
        self.log = common.get_logger("history")
        self.db = db

    def contains(self, link: str) -> bool:
        """Return True if the link has been submitted before.

        If the lookup fails, the error is logged and the link counts as new.
        """
        try:
            return self.db.contains(link)
        except StoreError as err:
            self.log.error("Error looking for %s in history: %s", link, err)
            return False

    def record(self, link: str, title: str) -> None:
        """Remember that link has been submitted. Raises StoreError."""
        self.db.put(link, title)
        self.log.debug("%s saved into history", link)


class RetryStore:
    """RetryStore is the queue of Submissions that failed and need to be retried."""

    __slots__ = ["log", "db"]

    log: logging.Logger
    db: StoreDB

    def __init__(self, db: StoreDB) -> None:
        self.log = common.get_logger("retry")
        self.db = db

    def contains(self, link: str) -> bool:
        """Return True if a Submission for link is waiting to be retried.

        If the lookup fails, the error is logged and the link counts as absent.
        """
        try:
            return self.db.contains(link)
        except StoreError as err:
            self.log.error("Error looking for %s in retry queue: %s", link, err)
            return False

    def record(self, link: str, sub: Submission) -> None:
        """Queue a failed Submission. Raises StoreError."""
        self.db.put(link, sub)
        self.log.debug("%s queued for retry", link)

    def remove(self, link: str) -> None:
        """Remove the Submission for link from the queue. Raises StoreError."""
        self.db.delete(link)
        self.log.debug("%s removed from retry queue", link)

    def enumerate(self) -> dict[str, Submission]:
        """Return a snapshot of the queue. Raises StoreError."""
        return self.db.items()


# Local Variables: #
# python-indent: 4 #
# End: #
