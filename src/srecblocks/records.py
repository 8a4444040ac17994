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

r"""Motorola S-record records.

See Also:
    `<https://en.wikipedia.org/wiki/SREC_(file_format)>`_
"""

import enum
import sys
from typing import IO
from typing import Any
from typing import Mapping
from typing import MutableMapping
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Type
from typing import Union

from .base import AnyBytes
from .base import EllipsisType
from .base import InvalidRecordError
from .base import MalformedLineError
from .base import MetadataMissingError
from .base import NormalizationFailedError
from .base import UnknownRecordTypeError
from .base import colorize_tokens
from .utils import hexlify
from .utils import is_hex
from .utils import unhexlify


class SrecTag(enum.IntEnum):
    r"""Motorola S-record tag."""

    HEADER = 0
    r"""Header string. Optional."""

    DATA_16 = 1
    r"""16-bit address data record."""

    DATA_24 = 2
    r"""24-bit address data record."""

    DATA_32 = 3
    r"""32-bit address data record."""

    RESERVED = 4
    r"""Reserved tag."""

    COUNT_16 = 5
    r"""16-bit record count. Optional."""

    COUNT_24 = 6
    r"""24-bit record count. Optional."""

    START_32 = 7
    r"""32-bit start address. Terminates :attr:`DATA_32`."""

    START_24 = 8
    r"""24-bit start address. Terminates :attr:`DATA_24`."""

    START_16 = 9
    r"""16-bit start address. Terminates :attr:`DATA_16`."""

    @classmethod
    def from_name(cls, name: str) -> 'SrecTag':
        r"""Looks up a tag by its name.

        Args:
            name (str):
                Two-character tag name, like ``'S1'``.
                Case-insensitive; surrounding whitespace is ignored.

        Returns:
            :class:`SrecTag`: Matching tag.

        Raises:
            :class:`UnknownRecordTypeError`: No tag matches `name`.

        Examples:
            >>> from srecblocks.records import SrecTag
            >>> SrecTag.from_name('S1')
            <SrecTag.DATA_16: 1>
            >>> SrecTag.from_name(' s9 ')
            <SrecTag.START_16: 9>
            >>> SrecTag.from_name('X1')
            Traceback (most recent call last):
                ...
            srecblocks.base.UnknownRecordTypeError: unknown record type: 'X1'
        """

        key = name.strip().upper()
        for tag, info in TAG_INFO.items():
            if info.name == key:
                return tag
        raise UnknownRecordTypeError(f'unknown record type: {name!r}')

    def _get_info(self) -> 'TagInfo':

        info = TAG_INFO.get(self)
        if info is None:
            raise MetadataMissingError(f'missing tag metadata: {self!r}')
        return info

    def get_address_size(self) -> int:
        r"""Size of the *address* field, in bytes.

        Examples:
            >>> from srecblocks.records import SrecTag
            >>> SrecTag.DATA_24.get_address_size()
            3
            >>> SrecTag.COUNT_16.get_address_size()
            0
        """

        return self._get_info().address_size

    def get_name(self) -> str:
        r"""Two-character tag name, as serialized.

        Examples:
            >>> from srecblocks.records import SrecTag
            >>> SrecTag.START_24.get_name()
            'S8'
        """

        return self._get_info().name

    def get_tag_match(self) -> Optional['SrecTag']:
        r"""Calculates the matching tag.

        Given *data* or *start address* records, it returns the matching tag.

        Returns:
            :class:`SrecTag`: Matching tag for *self*, or ``None``

        Examples:
            >>> from srecblocks.records import SrecTag
            >>> SrecTag.DATA_16.get_tag_match()
            <SrecTag.START_16: 9>
            >>> SrecTag.START_32.get_tag_match()
            <SrecTag.DATA_32: 3>
            >>> SrecTag.HEADER.get_tag_match() is None
            True
        """

        MATCHES = (None, 9, 8, 7, None, None, None, 3, 2, 1)
        match = MATCHES[self]
        if match is None:
            return None
        tag_type = type(self)
        return tag_type(match)

    def has_data(self) -> bool:
        r"""Tells whether the *data* field is allowed.

        Examples:
            >>> from srecblocks.records import SrecTag
            >>> SrecTag.COUNT_16.has_data()
            True
            >>> SrecTag.START_16.has_data()
            False
        """

        return self._get_info().has_data

    def is_count(self) -> bool:
        r"""Tells whether this is a record count tag."""

        return ((self == self.COUNT_16) or
                (self == self.COUNT_24))

    def is_data(self) -> bool:
        r"""Tells whether this is a data record tag."""

        return ((self == self.DATA_16) or
                (self == self.DATA_24) or
                (self == self.DATA_32))

    def is_header(self) -> bool:
        r"""Tells whether this is a header record tag."""

        return self == self.HEADER

    def is_start(self) -> bool:
        r"""Tells whether this is a start address (termination) record tag."""

        return ((self == self.START_16) or
                (self == self.START_24) or
                (self == self.START_32))


class TagInfo(NamedTuple):
    r"""Static tag metadata."""

    name: str
    r"""Serialized two-character name."""

    address_size: int
    r"""Required *address* field size, in bytes."""

    has_data: bool
    r"""The *data* field is allowed."""


TAG_INFO: Mapping[SrecTag, TagInfo] = {
    SrecTag.HEADER:   TagInfo('S0', 2, True),
    SrecTag.DATA_16:  TagInfo('S1', 2, True),
    SrecTag.DATA_24:  TagInfo('S2', 3, True),
    SrecTag.DATA_32:  TagInfo('S3', 4, True),
    SrecTag.RESERVED: TagInfo('S4', 0, False),
    SrecTag.COUNT_16: TagInfo('S5', 0, True),
    SrecTag.COUNT_24: TagInfo('S6', 0, True),
    SrecTag.START_32: TagInfo('S7', 4, False),
    SrecTag.START_24: TagInfo('S8', 3, False),
    SrecTag.START_16: TagInfo('S9', 2, False),
}
r"""Metadata of each tag."""


def calculate_checksum(data: AnyBytes) -> int:
    r"""Computes the S-record checksum.

    All the bytes are summed, the sum is truncated to 8 bits, and its one's
    complement is returned.

    Args:
        data (bytes):
            Bytes to sum.

    Returns:
        int: Checksum byte value.

    Examples:
        >>> from srecblocks.records import calculate_checksum
        >>> hex(calculate_checksum(b'\x03\x00\x00'))
        '0xfc'
    """

    return 0xFF - (sum(data) & 0xFF)


def trim_leading_zero_bytes(raw: AnyBytes, min_size: int = 2) -> bytes:
    r"""Strips leading zeros from a big-endian magnitude.

    Leading zero *nibbles* are counted, so that a magnitude keeps as many
    bytes as needed for its significant hexadecimal digits, but never fewer
    than `min_size` bytes.
    The result is left-padded with zeros if `raw` is too short.

    Args:
        raw (bytes):
            Big-endian magnitude.

        min_size (int):
            Minimum size of the result, in bytes.

    Returns:
        bytes: Trailing bytes of `raw`.

    Examples:
        >>> from srecblocks.records import trim_leading_zero_bytes
        >>> trim_leading_zero_bytes(b'\x00\x00\x00\x03')
        b'\x00\x03'
        >>> trim_leading_zero_bytes(b'\x00\x01\x23\x45')
        b'\x01#E'
        >>> trim_leading_zero_bytes(b'\x07', min_size=2)
        b'\x00\x07'
    """

    raw = bytes(raw)
    digits = hexlify(raw).lstrip(b'0')
    size = max((len(digits) + 1) >> 1, min_size)
    if size > len(raw):
        raw = bytes(size - len(raw)) + raw
    return raw[(len(raw) - size):]


def fit_address_tag(address: AnyBytes) -> Tuple[SrecTag, bytes]:
    r"""Fits the data record tag for an address.

    Significant hexadecimal digits are counted in pairs (rounding down):
    fewer than 2 pairs select :attr:`SrecTag.DATA_16` with a 2-byte address,
    fewer than 3 pairs select :attr:`SrecTag.DATA_24` with a 3-byte address,
    otherwise :attr:`SrecTag.DATA_32` with a 4-byte address.

    Args:
        address (bytes):
            Big-endian address bytes.

    Returns:
        tuple: The fitting data tag, and the resized address bytes.

    Examples:
        >>> from srecblocks.records import fit_address_tag
        >>> fit_address_tag(b'\x00\x00\x0F\xFF')
        (<SrecTag.DATA_16: 1>, b'\x0f\xff')
        >>> fit_address_tag(b'\x00\x00\x10\x00')
        (<SrecTag.DATA_24: 2>, b'\x00\x10\x00')
        >>> fit_address_tag(b'\x00\x12\x34\x56')
        (<SrecTag.DATA_32: 3>, b'\x00\x124V')
    """

    address = bytes(address)
    pairs = len(hexlify(address).lstrip(b'0')) >> 1

    if pairs < 2:
        tag = SrecTag.DATA_16
    elif pairs < 3:
        tag = SrecTag.DATA_24
    else:
        tag = SrecTag.DATA_32

    size = tag.get_address_size()
    if size > len(address):
        address = bytes(size - len(address)) + address
    return tag, address[(len(address) - size):]


class SrecRecord:
    r"""Motorola S-record record object.

    A record is a single line of an S-record file.
    It is made of the *tag* (``S0`` to ``S9``), the *count* byte (number of
    bytes of *address*, *data*, and *checksum*), the big-endian *address*
    bytes, the *data* bytes, and the *checksum* byte.

    Fields are stored as they are given or parsed; consistency is checked by
    :meth:`is_valid` (or :meth:`validate`), and can be restored by
    :meth:`normalize`.

    Attributes:
        tag (:class:`SrecTag`):
            The *nature* of the record.

        count (int):
            Declared byte count of *address*, *data*, and *checksum*.

        address (bytes):
            Big-endian *address* bytes; their number depends on :attr:`tag`.

        data (bytes):
            Payload bytes.

        checksum (int):
            Declared checksum byte.

        coords (int couple):
            Coordinates of the parsed record (line number, column);
            ``(-1, -1)`` if not parsed.

    Args:
        tag (:class:`SrecTag`):
            See :attr:`tag` attribute.

        address (bytes):
            See :attr:`address` attribute.

        data (bytes):
            See :attr:`data` attribute.

        count (int):
            See :attr:`count` attribute.
            ``Ellipsis`` initializes :attr:`count` via :meth:`compute_count`.

        checksum (int):
            See :attr:`checksum` attribute.
            ``Ellipsis`` initializes :attr:`checksum` via
            :meth:`compute_checksum`.

        coords (int couple):
            See :attr:`coords` attribute.
    """

    EQUALITY_KEYS: Sequence[str] = [
        'address',
        'checksum',
        'count',
        'data',
        'tag',
    ]
    r"""Meta keys for equality checks."""

    META_KEYS: Sequence[str] = [
        'address',
        'checksum',
        'coords',
        'count',
        'data',
        'tag',
    ]
    r"""Meta keys, used by :meth:`copy` and :meth:`__repr__`."""

    Tag: Type[SrecTag] = SrecTag

    def __bytes__(self) -> bytes:

        return self.to_bytestr()

    def __eq__(self, other: Any) -> bool:

        return not self != other

    def __init__(
        self,
        tag: SrecTag,
        address: AnyBytes = b'',
        data: AnyBytes = b'',
        count: Union[int, EllipsisType] = Ellipsis,
        checksum: Union[int, EllipsisType] = Ellipsis,
        coords: Tuple[int, int] = (-1, -1),
    ):

        self.tag: SrecTag = self.Tag(tag)
        self.address: bytes = bytes(address)
        self.data: bytes = bytes(data)
        self.coords: Tuple[int, int] = coords
        self.count: int = 0
        self.checksum: int = 0

        if count is Ellipsis:
            self.update_count()
        else:
            self.count = count.__index__()

        if checksum is Ellipsis:
            self.update_checksum()
        else:
            self.checksum = checksum.__index__()

    def __ne__(self, other: Any) -> bool:

        for key in self.EQUALITY_KEYS:
            if not hasattr(other, key):
                return True
            self_value = getattr(self, key)
            other_value = getattr(other, key)
            if self_value != other_value:
                return True

        return False

    def __repr__(self) -> str:

        meta = self.get_meta()
        text = f'<{self.__class__!s} @0x{id(self):08X} '
        text += ' '.join(f'{key!s}:={value!r}' for key, value in meta.items())
        text += '>'
        return text

    def __str__(self) -> str:
        r"""Serializes the record into a string.

        Unlike :meth:`to_bytestr`, no line terminator is appended.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> str(SrecRecord.create_start(0x0123))
            'S9030123D8'
        """

        return self.to_str()

    @property
    def address_value(self) -> int:
        r"""int: Address as an integer.

        The *address* bytes are interpreted as big-endian, keeping the last
        4 bytes at most.
        Setting a value stores its 4-byte big-endian form.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> record = SrecRecord.parse('S9030123D8')
            >>> hex(record.address_value)
            '0x123'
            >>> record.address_value = 0xABCD
            >>> record.address
            b'\x00\x00\xab\xcd'
        """

        return int.from_bytes(self.address[-4:], 'big')

    @address_value.setter
    def address_value(self, address: int) -> None:

        address = address.__index__()
        if not 0 <= address <= 0xFFFFFFFF:
            raise ValueError('address overflow')
        self.address = address.to_bytes(4, 'big')

    def compute_checksum(self) -> int:
        r"""Computes the checksum of *count*, *address*, and *data*.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> record = SrecRecord.parse('S00600004844521B')
            >>> hex(record.compute_checksum())
            '0x1b'
        """

        buffer = bytes([self.count & 0xFF]) + self.address + self.data
        return calculate_checksum(buffer)

    def compute_count(self) -> int:

        return len(self.address) + len(self.data) + 1

    def copy(self) -> 'SrecRecord':  # shallow

        meta = self.get_meta()
        tag = meta.pop('tag')
        cls = type(self)
        return cls(tag, **meta)

    @classmethod
    def create_count(cls, count: int) -> 'SrecRecord':
        r"""Creates a record count record.

        The most compact *record count* tag is chosen by :meth:`normalize`.

        Args:
            count (int):
                Number of preceding *data* records.

        Returns:
            :class:`SrecRecord`: Record count record object.

        Raises:
            :class:`NormalizationFailedError`: `count` does not fit 3 bytes.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> str(SrecRecord.create_count(3))
            'S5030003F9'
        """

        count = count.__index__()
        if not 0 <= count <= 0xFFFFFFFF:
            raise ValueError('count overflow')

        record = cls(cls.Tag.COUNT_16, data=count.to_bytes(4, 'big'))
        record._normalize_or_raise()
        return record

    @classmethod
    def create_data(cls, address: int, data: AnyBytes) -> 'SrecRecord':
        r"""Creates a data record.

        The *data* tag is chosen by :meth:`normalize`, as per
        :func:`fit_address_tag`.

        Args:
            address (int):
                Record address.

            data (bytes):
                Record byte data.

        Returns:
            :class:`SrecRecord`: Data record object.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> str(SrecRecord.create_data(0x0123, b'abc'))
            'S1060123616263AF'
            >>> str(SrecRecord.create_data(0x1234, b'abc'))
            'S2070012346162638C'
        """

        record = cls(cls.Tag.DATA_16, data=data)
        record.address_value = address
        record._normalize_or_raise()
        return record

    @classmethod
    def create_header(cls, data: AnyBytes = b'') -> 'SrecRecord':
        r"""Creates a header record.

        Args:
            data (bytes):
                Header byte data.

        Returns:
            :class:`SrecRecord`: Header record.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> str(SrecRecord.create_header())
            'S0030000FC'
            >>> str(SrecRecord.create_header(b'HDR'))
            'S00600004844521B'
        """

        record = cls(cls.Tag.HEADER, data=data)
        record._normalize_or_raise()
        return record

    @classmethod
    def create_start(
        cls,
        address: int = 0,
        tag: Optional[SrecTag] = None,
    ) -> 'SrecRecord':
        r"""Creates a start address (termination) record.

        Args:
            address (int):
                Start address.

            tag (:class:`SrecTag`):
                Chosen *start* tag; :attr:`SrecTag.START_16` if ``None``.
                The *address* field is sized accordingly.

        Returns:
            :class:`SrecRecord`: Start address record object.

        Raises:
            ValueError: Invalid tag, or `address` does not fit.

        Examples:
            >>> from srecblocks.records import SrecRecord, SrecTag
            >>> str(SrecRecord.create_start(0x1000, tag=SrecTag.START_24))
            'S804001000EB'
        """

        Tag = cls.Tag
        if tag is None:
            tag = Tag.START_16
        elif not Tag(tag).is_start():
            raise ValueError('invalid start tag')

        size = tag.get_address_size()
        address = address.__index__()
        if not 0 <= address < (1 << (size * 8)):
            raise ValueError('address overflow')

        record = cls(tag, address=address.to_bytes(size, 'big'))
        return record

    def data_to_int(self) -> int:
        r"""Interprets data bytes as a big-endian unsigned integer.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> SrecRecord.parse('S5030003F9').data_to_int()
            3
        """

        return int.from_bytes(self.data, 'big')

    def get_meta(self) -> MutableMapping[str, Any]:

        meta = {key: getattr(self, key) for key in self.META_KEYS}
        return meta

    def is_address_valid(self) -> bool:

        return len(self.address) == self.tag.get_address_size()

    def is_checksum_valid(self) -> bool:

        return self.checksum == self.compute_checksum()

    def is_count_valid(self) -> bool:

        return 0 <= self.count <= 0xFF and self.count == self.compute_count()

    def is_data_valid(self) -> bool:
        r"""Checks the *data* presence rule.

        Tags without a *data* field require empty :attr:`data`.
        Tags with a *data* field accept any :attr:`data`, even empty.
        """

        return self.tag.has_data() or not self.data

    def is_valid(self) -> bool:
        r"""Tells whether the record is self-consistent.

        Returns:
            bool: :attr:`count`, :attr:`address` size, :attr:`data` presence,
            and :attr:`checksum` are all consistent.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> SrecRecord.parse('S9030000FC').is_valid()
            True
            >>> SrecRecord.parse('S9030000FD').is_valid()
            False
        """

        return (self.is_count_valid() and
                self.is_address_valid() and
                self.is_data_valid() and
                self.is_checksum_valid())

    def normalize(self) -> bool:
        r"""Makes the record consistent.

        Depending on :attr:`tag`:

        * *header* with zero address: zero address of the required size;
        * *data*: tag and address fitted via :func:`fit_address_tag`;
        * *start*: address fitted via :func:`fit_address_tag`, tag kept,
          data cleared;
        * *count*: address cleared, data trimmed to 2 or 3 bytes, selecting
          :attr:`SrecTag.COUNT_16` or :attr:`SrecTag.COUNT_24`;
        * anything else, including a *header* with non-zero address: address
          cleared.

        Then :attr:`count` and :attr:`checksum` are updated.

        Returns:
            bool: The resulting record is valid (see :meth:`is_valid`).

        Raises:
            :class:`NormalizationFailedError`: *count* data wider than 3
            bytes.

        Examples:
            >>> from srecblocks.records import SrecRecord, SrecTag
            >>> record = SrecRecord(SrecTag.DATA_32, address=b'\0\0\0\x10', data=b'abc')
            >>> record.normalize()
            True
            >>> str(record)
            'S1060010616263C3'
        """

        Tag = self.Tag
        tag = self.tag

        if tag == Tag.HEADER and not self.address_value:
            self.address = bytes(tag.get_address_size())

        elif tag.is_data():
            self.tag, self.address = fit_address_tag(self.address)

        elif tag.is_start():
            _, self.address = fit_address_tag(self.address)
            self.data = b''

        elif tag.is_count():
            self.address = b''
            self.data = trim_leading_zero_bytes(self.data, min_size=2)
            size = len(self.data)
            if size == 2:
                self.tag = Tag.COUNT_16
            elif size == 3:
                self.tag = Tag.COUNT_24
            else:
                raise NormalizationFailedError(f'record count too wide: {size} bytes')

        else:
            self.address = b''

        self.update_count()
        self.update_checksum()
        return self.is_valid()

    def _normalize_or_raise(self) -> None:

        if not self.normalize():
            raise NormalizationFailedError('cannot normalize record')

    @classmethod
    def parse(
        cls,
        line: Union[str, AnyBytes],
        coords: Tuple[int, int] = (-1, -1),
    ) -> 'SrecRecord':
        r"""Parses a record from a line.

        Surrounding whitespace is ignored, as well as any characters after
        the *checksum* field declared by the *count* field.
        The parsed record is **not** validated; see :meth:`is_valid`.

        Args:
            line (str or bytes):
                Line to parse.

            coords (int couple):
                See :attr:`coords`.

        Returns:
            :class:`SrecRecord`: Parsed record.

        Raises:
            :class:`MalformedLineError`: Line too short, or not hexadecimal.
            :class:`UnknownRecordTypeError`: Unknown tag.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> record = SrecRecord.parse('S00600004844521B')
            >>> record.tag, record.address, record.data
            (<SrecTag.HEADER: 0>, b'\x00\x00', b'HDR')
            >>> SrecRecord.parse('S10612')
            Traceback (most recent call last):
                ...
            srecblocks.base.MalformedLineError: line too short
        """

        if not isinstance(line, str):
            try:
                line = bytes(line).decode('ascii')
            except UnicodeDecodeError as exc:
                raise MalformedLineError('non-ASCII characters') from exc

        line = line.strip()
        if len(line) < 4:
            raise MalformedLineError('line too short')

        tag = cls.Tag.from_name(line[:2])
        if not is_hex(line[2:4]):
            raise MalformedLineError('invalid count field')
        count = int(line[2:4], 16)

        address_endex = 4 + (tag.get_address_size() * 2)
        data_endex = 4 + (count * 2) - 2
        checksum_endex = data_endex + 2

        if data_endex < address_endex:
            raise MalformedLineError('count too small')
        if len(line) < checksum_endex:
            raise MalformedLineError('line too short')
        if not is_hex(line[4:checksum_endex]):
            raise MalformedLineError('invalid hexadecimal digits')

        address = unhexlify(line[4:address_endex])
        data = unhexlify(line[address_endex:data_endex])
        checksum = int(line[data_endex:checksum_endex], 16)

        record = cls(tag,
                     address=address,
                     data=data,
                     count=count,
                     checksum=checksum,
                     coords=coords)
        return record

    def print(
        self,
        stream: Optional[IO] = None,
        color: bool = False,
        end: AnyBytes = b'\r\n',
    ) -> 'SrecRecord':
        r"""Prints a record.

        The record is converted into tokens (eventually colorized) then joined
        and written onto a byte stream (*stdout* by default).

        Args:
            stream (bytes IO):
                The byte stream where the record tokens are printed.
                If ``None``, *stdout* is selected.

            color (bool):
                Tokens are colorized before printing.

            end (bytes):
                Line terminator.

        Returns:
            :class:`SrecRecord`: *self*.
        """

        if stream is None:
            stream = sys.stdout.buffer
        tokens = self.to_tokens(end=end)
        if color:
            tokens = colorize_tokens(tokens)
        stream.writelines(tokens.values())
        return self

    def serialize(self, stream: IO, end: AnyBytes = b'\r\n') -> 'SrecRecord':

        stream.write(self.to_bytestr(end=end))
        return self

    def to_bytestr(self, end: AnyBytes = b'\r\n') -> bytes:
        r"""Converts into a byte string, with a line terminator.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> SrecRecord.create_start().to_bytestr()
            b'S9030000FC\r\n'
        """

        return self.to_str().encode('ascii') + bytes(end)

    def to_str(self) -> str:
        r"""Converts into a line of text.

        Hexadecimal digits are uppercase, without any separators nor line
        terminator.

        Returns:
            str: Serialized record.

        Raises:
            :class:`InvalidRecordError`: The record is not valid.
        """

        self.validate()
        text = '%s%02X%s%s%02X' % (
            self.tag.get_name(),
            self.count,
            hexlify(self.address).decode('ascii'),
            hexlify(self.data).decode('ascii'),
            self.checksum,
        )
        return text

    def to_tokens(self, end: AnyBytes = b'\r\n') -> Mapping[str, bytes]:

        self.validate()
        return {
            'begin': b'S',
            'tag': b'%X' % self.tag,
            'count': b'%02X' % self.count,
            'address': hexlify(self.address),
            'data': hexlify(self.data),
            'checksum': b'%02X' % self.checksum,
            'end': bytes(end),
        }

    def update_checksum(self) -> 'SrecRecord':

        self.checksum = self.compute_checksum()
        return self

    def update_count(self) -> 'SrecRecord':

        self.count = self.compute_count()
        return self

    def validate(self) -> 'SrecRecord':
        r"""Validates consistency of attribute values.

        Returns:
            :class:`SrecRecord`: *self*.

        Raises:
            :class:`InvalidRecordError`: The first inconsistency found.

        Examples:
            >>> from srecblocks.records import SrecRecord
            >>> _ = SrecRecord.parse('S9030000FC').validate()
            >>> SrecRecord.parse('S9030000FD').validate()
            Traceback (most recent call last):
                ...
            srecblocks.base.InvalidRecordError: wrong checksum
        """

        if not self.is_count_valid():
            raise InvalidRecordError('wrong count')

        if not self.is_address_valid():
            raise InvalidRecordError('address size mismatch')

        if not self.is_data_valid():
            raise InvalidRecordError('unexpected data')

        if not self.is_checksum_valid():
            raise InvalidRecordError('wrong checksum')

        return self
