#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-12 21:48:13 krylon>
#
# /data/code/python/torrentrss/src/torrentrss/rules.py
# created on 11. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the torrentrss feed watcher. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
torrentrss.rules

(c) 2026 Benjamin Walkenhorst
"""


from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from torrentrss.model import Rule


def matches(title: str, rule: Rule) -> bool:
    """Return True if the title contains every token of the Rule's filter."""
    return all(tok in title for tok in rule.tokens)


def match(title: str, rules: Sequence[Rule]) -> Optional[tuple[Path, list[str]]]:
    """Return the download directory and labels of the first Rule matching the title.

    Rules are checked in the order they were declared in, so if several
    Rules match, the earliest one wins. If none match, return None.
    """
    for rule in rules:
        if matches(title, rule):
            return rule.download_dir, list(rule.labels)
    return None


# Local Variables: #
# python-indent: 4 #
# End: #
