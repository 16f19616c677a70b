# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import functools
import re
from typing import Pattern


@functools.lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> Pattern[str]:
    """
    Translate a shell-style glob into a compiled regular expression.

    Supported syntax:
      - ``*`` matches any run of characters within a single path segment
      - ``?`` matches one character other than ``/``
      - ``[...]`` / ``[!...]`` character classes
      - ``**`` matches across path segments; ``**/`` also matches zero directories
      - ``\\`` escapes the next character

    Parameters:
    pattern (str): The glob pattern.

    Returns:
    Pattern[str]: A regular expression that must match the whole path.
    """
    i, length = 0, len(pattern)
    parts = []
    while i < length:
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < length and pattern[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            end = i + 1
            if end < length and pattern[end] in "!^":
                end += 1
            if end < length and pattern[end] == "]":
                end += 1
            while end < length and pattern[end] != "]":
                end += 1
            if end >= length:
                # unterminated class, treat the bracket literally
                parts.append(re.escape(char))
            else:
                body = pattern[i + 1 : end].replace("\\", "\\\\")
                if body[0] in "!^":
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = end + 1
                continue
        elif char == "\\" and i + 1 < length:
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts) + r"\Z", re.DOTALL)


def glob_match(pattern: str, path: str) -> bool:
    """Returns True if the whole of ``path`` matches the glob ``pattern``."""
    return compile_glob(pattern).match(path) is not None
