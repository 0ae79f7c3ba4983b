"""
text_match.py - Filename Pattern Matching

Compiles glob patterns into case-insensitive regular expressions.
Supports *, ?, [...] / [!...] and ** (any number of directories).
"""

import re


def is_recursive(pattern: str) -> bool:
    """Whether the pattern reaches into sub-directories"""
    return "/" in pattern


def translate_glob(pattern: str) -> str:
    """
    Translate a glob pattern to a regular expression source

    Args:
        pattern: Glob pattern, "/" separates directories

    Returns:
        Regex source anchored at both ends
    """
    i, n = 0, len(pattern)
    parts = []

    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    # "**/" also matches zero directories
                    parts.append("(?:[^/]*/)*")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                # Unclosed bracket is literal
                parts.append(re.escape(c))
            else:
                body = pattern[i + 1:j].replace("\\", "\\\\")
                if body[0] in "!^":
                    body = "^" + body[1:]
                parts.append(f"(?!/)[{body}]")
                i = j
        else:
            parts.append(re.escape(c))
        i += 1

    return "\\A" + "".join(parts) + "\\Z"


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile a glob pattern (always case-insensitive)

    Raises:
        ValueError: Pattern is empty or cannot be compiled
    """
    if not pattern:
        raise ValueError("Pattern cannot be empty")

    try:
        return re.compile(translate_glob(pattern), re.IGNORECASE)
    except re.error as e:
        raise ValueError(f"Invalid pattern '{pattern}': {e}") from e


def matches(name: str, pattern: re.Pattern) -> bool:
    """Check if a relative POSIX name matches a compiled pattern"""
    return pattern.match(name) is not None
