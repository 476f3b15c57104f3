# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Parse and format CPU lists in the Linux kernel range syntax, e.g., "0,4,6-12,18".
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import typing
from cpufreqlibs.helperlibs import Trivial
from cpufreqlibs.helperlibs.Exceptions import ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Iterable

_DECIMAL_REGEX = re.compile(r"^[0-9]+$")

def _parse_num(token: str, text: str, what: str) -> int:
    """
    Parse a decimal CPU number in a CPU list.

    Args:
        token: The CPU number string to parse.
        text: The entire CPU list string, for the possible error message.
        what: A string describing the CPU list, for the possible error message.

    Returns:
        The CPU number.
    """

    token = token.strip()
    if not _DECIMAL_REGEX.match(token):
        raise ErrorBadFormat(f"Bad {what} '{text}': error in '{token}': should be a decimal "
                             f"integer")
    return int(token)

def parse_range(text: str, what: str = "") -> list[int]:
    """
    Parse a CPU list in the Linux kernel range syntax.

    The CPU list is a comma-separated list of tokens, each token is either a decimal integer or an
    inclusive 'lo-hi' range. The result is the concatenation of the tokens expansions, in the same
    order as in 'text'. Duplicates are not removed.

    Args:
        text: The CPU list string to parse. Leading and trailing white-spaces are ignored.
        what: A string describing the CPU list, for the possible error message.

    Returns:
        The list of CPU numbers.

    Raises:
        ErrorBadFormat: If 'text' is empty, has an empty token, a token which is not a decimal
                        integer, or a bad range.

    Examples:
        Input: "0,4,6-12,18"
        Output: [0, 4, 6, 7, 8, 9, 10, 11, 12, 18].
        Input: "0-2,1"
        Output: [0, 1, 2, 1].
    """

    if not what:
        what = "CPU list"

    result: list[int] = []
    for token in text.strip().split(","):
        if "-" not in token:
            result.append(_parse_num(token, text, what))
            continue

        range_vals = token.split("-")
        if len(range_vals) != 2:
            raise ErrorBadFormat(f"Bad {what} '{text}': error in '{token.strip()}': should be two "
                                 f"integers separated by '-'")

        lo = _parse_num(range_vals[0], text, what)
        hi = _parse_num(range_vals[1], text, what)
        if lo > hi:
            raise ErrorBadFormat(f"Bad {what} '{text}': error in range '{token.strip()}': the "
                                 f"first number should not be greater than the second")

        result += range(lo, hi + 1)

    return result

def rangify(cpus: Iterable[int]) -> str:
    """
    Format CPU numbers as a CPU list in the Linux kernel range syntax. The CPU numbers are sorted and
    de-duplicated.

    Args:
        cpus: The CPU numbers to format.

    Returns:
        The CPU list string, e.g., "0-3,8".
    """

    return Trivial.rangify(cpus)
