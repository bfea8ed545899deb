#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-13 20:31:17 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/__init__.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss

(c) 2026 Benjamin Walkenhorst

Watch RSS/Atom feeds and hand new torrents that match a set of Rules to
Transmission.
"""


# Local Variables: #
# python-indent: 4 #
# End: #
