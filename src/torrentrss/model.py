#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 16:20:07 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/model.py
# created on 10. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.model

(c) 2026 Benjamin Walkenhorst
"""


from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple


@dataclass(kw_only=True, slots=True, frozen=True)
class Rule:
    """Rule sends the Items whose title matches the filter to a download directory."""

    filter: str
    download_dir: Path
    labels: tuple[str, ...] = ()

    @property
    def tokens(self) -> list[str]:
        """Return the substrings a title must contain to match the Rule."""
        return self.filter.split()


@dataclass(kw_only=True, slots=True, frozen=True)
class Feed:
    """Feed is an RSS/Atom feed we watch for new torrents."""

    name: str
    url: str
    rules: tuple[Rule, ...] = ()


class Candidate(NamedTuple):
    """Candidate is a link and a title extracted from a feed entry."""

    link: str
    title: str


@dataclass(kw_only=True, slots=True)
class Submission:
    """Submission is a matching Item, ready to be handed to the download daemon.

    Two Submissions are the same if their links are the same.
    """

    link: str
    title: str
    download_dir: Path
    labels: list[str] = field(default_factory=list)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Submission):
            return NotImplemented
        return self.link == other.link

    def __hash__(self) -> int:
        return hash(self.link)

    @property
    def string(self) -> str:
        """Return a minimal string representation of the Submission."""
        return f"Submission(title='{self.title}', link='{self.link}', dir='{self.download_dir}')"


# Local Variables: #
# python-indent: 4 #
# End: #
