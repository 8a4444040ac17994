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

r"""Base types, errors, and token colorization."""

import os
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Type
from typing import Union

import colorama

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]
AnyPath: TypeAlias = Union[bytes, bytearray, str, os.PathLike]
EllipsisType: TypeAlias = Type['Ellipsis']

TOKEN_COLOR_CODES: Mapping[str, bytes] = {
    '':         colorama.Style.RESET_ALL.encode(),
    '<':        colorama.Style.RESET_ALL.encode(),
    '>':        colorama.Style.RESET_ALL.encode(),
    'address':  colorama.Fore.RED.encode(),
    'after':    colorama.Style.RESET_ALL.encode(),
    'before':   colorama.Style.RESET_ALL.encode(),
    'begin':    colorama.Fore.YELLOW.encode(),
    'checksum': colorama.Fore.MAGENTA.encode(),
    'count':    colorama.Fore.BLUE.encode(),
    'data':     colorama.Fore.CYAN.encode(),
    'dataalt':  colorama.Fore.LIGHTCYAN_EX.encode(),
    'end':      colorama.Style.RESET_ALL.encode(),
    'tag':      colorama.Fore.GREEN.encode(),
}
r"""ANSI color codes for each possible token type."""


def colorize_tokens(
    tokens: Mapping[str, bytes],
    altdata: bool = True,
) -> Mapping[str, bytes]:
    r"""Prepends ANSI color codes to record field tokens.

    For each token within `tokens`, its key is used to look up the ANSI color
    code from :data:`TOKEN_COLOR_CODES`.
    The retrieved code (byte string) is prepended to the token.
    All the modified tokens are then collected and returned.

    Args:
        tokens (dict):
            A mapping of each token key name to token byte string.

        altdata (bool):
            If true, it alternates each byte (two hex digits) between the ANSI
            color codes mapped with keys ``data`` (even byte index) and
            ``dataalt`` (odd byte index).
            If false, only the ``data`` code is prepended.

    Returns:
        dict: `tokens` with prepended ANSI color codes.

    Examples:
        >>> from srecblocks.base import colorize_tokens
        >>> from srecblocks.records import SrecRecord
        >>> from pprint import pprint

        >>> record = SrecRecord.parse('S9030000FC')
        >>> colorized = colorize_tokens(record.to_tokens())
        >>> pprint(colorized)  # doctest: +NORMALIZE_WHITESPACE
        {'<': b'\x1b[0m',
         '>': b'\x1b[0m',
         'address': b'\x1b[31m0000',
         'begin': b'\x1b[33mS',
         'checksum': b'\x1b[35mFC',
         'count': b'\x1b[34m03',
         'end': b'\x1b[0m\r\n',
         'tag': b'\x1b[32m9'}
    """

    codes = TOKEN_COLOR_CODES
    colorized = {}
    colorized.setdefault('<', codes['<'])

    for key, value in tokens.items():
        if key not in codes:
            key = ''
        if value:
            code = codes[key]

            if key == 'data' and altdata:
                altcode = codes['dataalt']
                buffer = bytearray()
                length = len(value)
                i = 0

                for i in range(0, length - 1, 2):
                    buffer.extend(altcode if i & 2 else code)
                    buffer.append(value[i])
                    buffer.append(value[i + 1])

                if length & 1:
                    buffer.extend(code if i & 2 else altcode)
                    buffer.append(value[length - 1])

                colorized[key] = bytes(buffer)
            else:
                colorized[key] = code + value

    colorized.setdefault('>', codes['>'])
    return colorized


# ----------------------------------------------------------------------------

class SrecError(ValueError):
    r"""Base class of all the S-record errors.

    It derives from :class:`ValueError`, so that callers can handle any
    S-record specific failure the same way as a plain value error.
    """


class MetadataMissingError(SrecError):
    r"""A record tag has no metadata entry."""


class WidthOutOfRangeError(SrecError):
    r"""Record data width outside of the supported range."""


class InvalidRecordError(SrecError):
    r"""A record is not self-consistent, thus cannot be serialized."""


class NormalizationFailedError(InvalidRecordError):
    r"""A record could not be made self-consistent."""


class LineError(SrecError):
    r"""Error bound to a line of the parsed input.

    Args:
        message (str):
            Error description.

        lineno (int):
            1-based line number; ``None`` if not known yet.

    Attributes:
        lineno (int):
            1-based line number of the offending line, or ``None``.
    """

    def __init__(self, message: str, lineno: Optional[int] = None):

        super().__init__(message)
        self.message: str = message
        self.lineno: Optional[int] = lineno

    def __str__(self) -> str:

        if self.lineno is None:
            return self.message
        return f'line {self.lineno}: {self.message}'


class UnknownRecordTypeError(LineError):
    r"""A record type name does not match any known tag."""


class MalformedLineError(LineError):
    r"""Line too short, or non-hexadecimal characters within a hex field."""


class LineInvalidError(LineError):
    r"""A decoded record fails its own consistency checks."""


class CountMismatchError(LineError):
    r"""A record count record disagrees with the actual record count.

    Attributes:
        expected (int):
            Count declared by the record count record.

        actual (int):
            Number of data records backing the current block.
    """

    def __init__(self, lineno: Optional[int], expected: int, actual: int):

        super().__init__(f'record count mismatch: expected {expected}, actual {actual}', lineno)
        self.expected: int = expected
        self.actual: int = actual


class TerminatorKindMismatchError(LineError):
    r"""Termination record type does not match the open data record type."""


class NoBlockToTerminateError(LineError):
    r"""Termination record without any block to terminate."""


class TerminatorAddressMismatchError(LineError):
    r"""Termination record address does not match any block start address."""


class UnsupportedRecordTypeError(LineError):
    r"""Record type not handled by the file parser."""
