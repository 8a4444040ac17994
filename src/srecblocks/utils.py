# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""Generic utility functions."""

import binascii
import re
from typing import Any
from typing import Optional
from typing import Union

from .base import EllipsisType

INT_REGEX = re.compile(r'^\s*(?P<sign>[+-]?)\s*'
                       r'(?P<prefix>(0x|0b|0o|0)?)'
                       r'(?P<value>[a-f0-9]+)'
                       r'(?P<suffix>h?)\s*$')
r"""Matches a signed integer, with optional base prefix or ``h`` suffix."""

HEX_REGEX = re.compile(r'^[0-9A-Fa-f]*$')
r"""Matches a string made of hexadecimal digits only."""

DEFAULT_DELETE: bytes = b' \t.-:\r\n'
r"""Separators and whitespace removed by :func:`unhexlify` with ``delete=...``."""


def hexlify(
    bytestr: Union[bytes, bytearray],
    sep: Optional[Union[bytes, bytearray]] = None,
    upper: bool = True,
) -> bytes:
    r"""Encodes bytes as hexadecimal digits.

    Record fields are serialized with uppercase digits and no separators,
    which is the default.

    Examples:
        >>> from srecblocks.utils import hexlify
        >>> hexlify(b'\xAA\xBB\xCC')
        b'AABBCC'
        >>> hexlify(b'\xAA\xBB\xCC', sep=b'-', upper=False)
        b'aa-bb-cc'
    """

    hexstr = binascii.hexlify(bytestr, sep) if sep else binascii.hexlify(bytestr)
    return hexstr.upper() if upper else hexstr


def is_hex(text: str) -> bool:
    r"""Tells whether a string holds hexadecimal digits only.

    The empty string is considered hexadecimal.

    Examples:
        >>> is_hex('00FFaa')
        True
        >>> is_hex(' 0F')
        False
    """

    return HEX_REGEX.match(text) is not None


def parse_int(value: Union[str, Any]) -> Optional[int]:
    r"""Parses a command line integer.

    Strings are case-insensitive: ``0x`` prefix or ``h`` suffix for
    hexadecimal, ``0b`` for binary, ``0o`` or a bare leading ``0`` for octal,
    decimal otherwise.
    ``None`` is passed through; other objects go through :func:`int`.

    Raises:
        ValueError: Invalid string syntax.

    Examples:
        >>> parse_int('0x10'), parse_int('20h'), parse_int('-010')
        (16, 32, -8)
        >>> parse_int(None) is None
        True
    """

    if value is None:
        return None

    if not isinstance(value, str):
        return int(value)

    match = INT_REGEX.match(value.lower())
    if not match:
        raise ValueError(f'invalid syntax: {value!r}')
    sign, prefix, digits, suffix = match.group('sign', 'prefix', 'value', 'suffix')

    if suffix == 'h':
        if prefix in ('0b', '0o'):
            raise ValueError(f'invalid syntax: {value!r}')
        base = 16
    else:
        base = {'0x': 16, '0b': 2, '0o': 8, '0': 8}.get(prefix, 10)

    number = int(digits, base)
    return -number if sign == '-' else number


def unhexlify(
    hexstr: Union[str, bytes, bytearray],
    delete: Optional[Union[bytes, bytearray, EllipsisType]] = None,
) -> bytes:
    r"""Decodes hexadecimal digits into bytes.

    Args:
        hexstr (str or bytes):
            Hexadecimal digits.

        delete (bytes):
            Byte values removed before decoding; ``Ellipsis`` selects
            :data:`DEFAULT_DELETE`.

    Raises:
        ValueError: Odd length or non-hexadecimal characters.

    Examples:
        >>> from srecblocks.utils import unhexlify
        >>> unhexlify('aabbcc')
        b'\xaa\xbb\xcc'
        >>> unhexlify(b'AA BB CC', delete=...)
        b'\xaa\xbb\xcc'
    """

    if isinstance(hexstr, str):
        hexstr = hexstr.encode('ascii')

    if delete is Ellipsis:
        delete = DEFAULT_DELETE
    if delete:
        hexstr = hexstr.translate(None, delete)

    return binascii.unhexlify(hexstr)
