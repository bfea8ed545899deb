#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:58:31 krylon>
#
# /data/code/python/torrentrss/tests/test_transmission.py
# created on 15. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.test_transmission

(c) 2026 Benjamin Walkenhorst
"""

import json
import os
import shutil
import unittest
from datetime import datetime
from typing import Any, Final

import httpx

from torrentrss import common
from torrentrss.config import Transmission
from torrentrss.transmission import (RPCConnectionError, RPCRejected,
                                     TransmissionClient, session_header)

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_transmission_%Y%m%d_%H%M%S"))

cfg: Final[Transmission] = Transmission(
    url="http://localhost:9091/transmission/rpc",
    username="user",
    password="secret",
)


class FakeDaemon:
    """FakeDaemon answers RPC requests the way Transmission does."""

    def __init__(self, result: str = "success") -> None:
        self.result = result
        self.session = "s3ss10n"
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get(session_header) != self.session:
            return httpx.Response(409, headers={session_header: self.session})
        body = json.loads(request.content)
        self.requests.append(body)
        return httpx.Response(200, json={
            "result": self.result,
            "arguments": {"torrent-added": {"id": 1, "name": "x"}}
            if self.result == "success" else {},
        })


class TestTransmission(unittest.IsolatedAsyncioTestCase):
    """Test the Transmission RPC client."""

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        shutil.rmtree(test_dir, ignore_errors=True)

    def client(self, handler) -> TransmissionClient:
        """Return a client that talks to handler."""
        return TransmissionClient(
            cfg,
            httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    async def test_01_add(self) -> None:
        """Add a torrent, going through the session handshake first."""
        daemon = FakeDaemon()
        tc = self.client(daemon)
        res = await tc.torrent_add("https://example.org/1.torrent",
                                   "/srv/downloads/shows",
                                   ["tv", "hd"])
        await tc.close()

        self.assertIn("torrent-added", res)
        self.assertEqual(tc.session_id, daemon.session)
        self.assertEqual(len(daemon.requests), 1)
        req = daemon.requests[0]
        self.assertEqual(req["method"], "torrent-add")
        self.assertEqual(req["arguments"]["filename"], "https://example.org/1.torrent")
        self.assertEqual(req["arguments"]["download-dir"], "/srv/downloads/shows")
        self.assertEqual(req["arguments"]["labels"], ["tv", "hd"])

    async def test_02_auth(self) -> None:
        """Credentials are sent as basic auth."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("Authorization", ""))
            return httpx.Response(200, json={"result": "success", "arguments": {}})

        tc = self.client(handler)
        await tc.torrent_add("https://example.org/1.torrent", "/tmp", None)
        await tc.close()
        self.assertTrue(seen[0].startswith("Basic "))

    async def test_03_rejected(self) -> None:
        """A result other than success is a rejection."""
        tc = self.client(FakeDaemon("invalid or corrupt torrent file"))
        with self.assertRaises(RPCRejected) as cm:
            await tc.torrent_add("https://example.org/bad.torrent", "/tmp")
        await tc.close()
        self.assertEqual(cm.exception.reason, "invalid or corrupt torrent file")

    async def test_04_unauthorized(self) -> None:
        """HTTP errors are connection errors."""
        tc = self.client(lambda request: httpx.Response(401, text="Unauthorized"))
        with self.assertRaises(RPCConnectionError):
            await tc.torrent_add("https://example.org/1.torrent", "/tmp")
        await tc.close()

    async def test_05_garbage(self) -> None:
        """Responses that are not JSON-RPC are connection errors."""
        tc = self.client(lambda request: httpx.Response(200, text="<html>Hello</html>"))
        with self.assertRaises(RPCConnectionError):
            await tc.torrent_add("https://example.org/1.torrent", "/tmp")
        await tc.close()

    async def test_06_refused(self) -> None:
        """Failure to connect is a connection error."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        tc = self.client(handler)
        with self.assertRaises(RPCConnectionError):
            await tc.torrent_add("https://example.org/1.torrent", "/tmp")
        await tc.close()

    async def test_07_null_arguments(self) -> None:
        """A successful response with null arguments is an empty result."""
        tc = self.client(lambda request: httpx.Response(
            200, json={"result": "success", "arguments": None}))
        res = await tc.torrent_add("https://example.org/1.torrent", "/tmp")
        await tc.close()
        self.assertEqual(res, {})


# Local Variables: #
# python-indent: 4 #
# End: #
