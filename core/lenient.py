#!/usr/bin/env python3
"""
Lenient Parsing Module
Token and number helpers shared by the SMD block parsers.

SMD files come from many legacy tools, so nothing here raises: malformed
numbers become 0 and the caller decides what to do with short lines.
"""

import re
from typing import List

# C atoi/atof accept a leading numeric prefix and ignore trailing garbage
_INT_PREFIX = re.compile(r'^\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(
    r'^\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))',
    re.IGNORECASE
)

# Quoted tokens may contain whitespace ("left hand")
_TOKEN = re.compile(r'"[^"]*"|\S+')


def tokenize(line: str) -> List[str]:
    """Split a line on whitespace, keeping double-quoted runs together

    Args:
        line: Raw text line

    Returns:
        list: Tokens, quotes still attached
    """
    return _TOKEN.findall(line)


def strip_quotes(token: str) -> str:
    """Remove one pair of surrounding double quotes if present"""
    if token.startswith('"'):
        token = token[1:]
    if token.endswith('"'):
        token = token[:-1]
    return token


def parse_int(token: str) -> int:
    """Parse an integer the way atoi does (0 on failure)"""
    match = _INT_PREFIX.match(token)
    if match is None:
        return 0
    return int(match.group(1))


def parse_float(token: str) -> float:
    """Parse a float the way atof does (0.0 on failure)"""
    match = _FLOAT_PREFIX.match(token)
    if match is None:
        return 0.0
    return float(match.group(1))


def strip_extension(path: str) -> str:
    """Drop the extension of the last path segment

    Directory components are kept as-is, so "models/v1.2/skin" keeps its
    dotted folder and "materials/brick.vmt" becomes "materials/brick".
    """
    separator = max(path.rfind('/'), path.rfind('\\'))
    dot = path.rfind('.')
    if dot <= separator:
        return path
    return path[:dot]
