#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:40:55 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/transmission.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.transmission

(c) 2026 Benjamin Walkenhorst

A minimal client for the Transmission RPC interface. We only ever need to
add torrents, so that is all it does.
"""


import logging
from typing import Any, Final, Optional

import httpx

from torrentrss import common
from torrentrss.common import TorrentRSSError
from torrentrss.config import Transmission

session_header: Final[str] = "X-Transmission-Session-Id"


class RPCError(TorrentRSSError):
    """Base class for errors talking to Transmission."""


class RPCConnectionError(RPCError):
    """Transmission could not be reached, or did not speak the protocol."""


class RPCRejected(RPCError):
    """Transmission understood the request but refused to carry it out."""

    reason: str

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransmissionClient:
    """TransmissionClient sends requests to a Transmission daemon."""

    __slots__ = [
        "log",
        "cfg",
        "client",
        "session_id",
    ]

    log: logging.Logger
    cfg: Transmission
    client: httpx.AsyncClient
    session_id: Optional[str]

    def __init__(self, cfg: Transmission, client: Optional[httpx.AsyncClient] = None) -> None:
        self.log = common.get_logger("transmission")
        self.cfg = cfg
        self.session_id = None
        if client is None:
            client = httpx.AsyncClient(
                headers={"User-Agent": f"{common.AppName}/{common.AppVersion}"},
                timeout=None,
            )
        self.client = client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers: dict[str, str] = {}
        if self.session_id is not None:
            headers[session_header] = self.session_id

        auth: Final[httpx.BasicAuth] = httpx.BasicAuth(self.cfg.username, self.cfg.password)
        return await self.client.post(self.cfg.url,
                                      json=payload,
                                      headers=headers,
                                      auth=auth)

    async def call(self, method: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Perform an RPC call and return the arguments of the response.

        Transmission answers the first request of a session with a 409 and a
        session ID we have to send along from then on.
        """
        payload: Final[dict[str, Any]] = {"method": method, "arguments": arguments}
        try:
            res: httpx.Response = await self._post(payload)
            if res.status_code == 409 and session_header in res.headers:
                self.session_id = res.headers[session_header]
                self.log.debug("Got new session ID %s", self.session_id)
                res = await self._post(payload)
            res.raise_for_status()
            data = res.json()
        except httpx.HTTPError as err:
            raise RPCConnectionError(f"{err.__class__.__name__}: {err}") from err
        except ValueError as err:
            raise RPCConnectionError(f"Invalid response from Transmission: {err}") from err

        if not isinstance(data, dict) or "result" not in data:
            raise RPCConnectionError(f"Invalid response from Transmission: {data!r}")

        if data["result"] != "success":
            raise RPCRejected(str(data["result"]))

        return data.get("arguments") or {}

    async def torrent_add(self,
                          filename: str,
                          download_dir: str,
                          labels: Optional[list[str]] = None) -> dict[str, Any]:
        """Ask Transmission to add a torrent from a URL or magnet link."""
        args: dict[str, Any] = {
            "filename": filename,
            "download-dir": download_dir,
        }
        if labels:
            args["labels"] = labels

        result = await self.call("torrent-add", args)
        if "torrent-duplicate" in result:
            self.log.info("Transmission already has %s",
                          result["torrent-duplicate"].get("name", filename))
        return result


# Local Variables: #
# python-indent: 4 #
# End: #
