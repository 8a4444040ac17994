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

r"""Motorola S-record files.

A file is parsed line by line; *data* records are folded into contiguous
blocks (:class:`SrecBlock`), splicing records into any block they continue,
while *record count* and *start address* (termination) records are checked
against the blocks being built.

Rendering goes the other way round, chopping each block into *data* records
of the requested width, optionally followed by *record count* and
termination records.
"""

import io
import logging
import sys
from typing import IO
from typing import Iterable
from typing import List
from typing import Optional
from typing import Type
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .base import CountMismatchError
from .base import InvalidRecordError
from .base import LineError
from .base import LineInvalidError
from .base import NoBlockToTerminateError
from .base import TerminatorAddressMismatchError
from .base import TerminatorKindMismatchError
from .base import UnsupportedRecordTypeError
from .base import WidthOutOfRangeError
from .blocks import SrecBlock
from .records import SrecRecord
from .records import SrecTag
from .records import fit_address_tag

logger = logging.getLogger(__name__)

ADDRESS_ENDEX: int = 0x100000000
r"""Exclusive end of the 32-bit address space."""

AnyLines = Union[str, AnyBytes, Iterable[Union[str, AnyBytes]]]


class SrecFile:
    r"""Motorola S-record file object.

    Args:
        title (str):
            See :attr:`title`.

        blocks (list of :class:`SrecBlock`):
            See :attr:`blocks`.

    Attributes:
        title (str):
            Header text, or ``None`` for no header.

        blocks (list of :class:`SrecBlock`):
            Memory blocks, in order of creation.

        diagnostics (list of str):
            Non-fatal issues found while parsing.

    Examples:
        >>> from srecblocks import SrecFile
        >>> file = SrecFile.parse(['S00600004844521B'])
        >>> file.title
        'HDR'
    """

    DEFAULT_DATALEN: int = 16
    r"""Default value of :attr:`maxdatalen`."""

    Block: Type[SrecBlock] = SrecBlock

    Record: Type[SrecRecord] = SrecRecord

    def __init__(
        self,
        title: Optional[str] = None,
        blocks: Optional[Iterable[SrecBlock]] = None,
    ):

        self.title: Optional[str] = title
        self.blocks: List[SrecBlock] = list(blocks or ())
        self.diagnostics: List[str] = []
        self._maxdatalen: int = self.DEFAULT_DATALEN

    @classmethod
    def _check_width(cls, width: int) -> int:

        width = width.__index__()
        Block = cls.Block
        if not Block.MIN_WIDTH <= width <= Block.MAX_WIDTH:
            raise WidthOutOfRangeError(f'data width out of range: {width}')
        return width

    @classmethod
    def _is_line_empty(cls, line: Union[str, AnyBytes]) -> bool:

        return not line or line.isspace()

    def _fold_data(self, block: Optional[SrecBlock], record: SrecRecord) -> SrecBlock:

        address = record.address_value

        if block is None or address != block.next_address:
            for other in self.blocks:
                if other.next_address == address:
                    logger.debug(f'splicing record at 0x{address:X} '
                                 f'into block at 0x{other.start_address:X}')
                    block = other
                    break
            else:
                logger.debug(f'new block at 0x{address:X}')
                block = self.Block(address)
                self.blocks.append(block)

        block.append(record)
        return block

    def _check_terminator(
        self,
        lineno: int,
        block: Optional[SrecBlock],
        data_tag: Optional[SrecTag],
        record: SrecRecord,
    ) -> None:

        if data_tag is None or data_tag.get_tag_match() != record.tag:
            raise TerminatorKindMismatchError('termination record type mismatch', lineno)

        if block is None:
            raise NoBlockToTerminateError('no block to terminate', lineno)

        address = record.address_value
        if address and address != block.start_address:
            if not any(other.start_address == address for other in self.blocks):
                raise TerminatorAddressMismatchError(
                    f'termination address 0x{address:X} matches no block', lineno)

            message = (f'line {lineno}: termination address 0x{address:X} '
                       f'refers to a block other than the current one')
            logger.warning(message)
            self.diagnostics.append(message)

    @property
    def maxdatalen(self) -> int:
        r"""int: Default width of the *data* field while rendering.

        Raises:
            :class:`WidthOutOfRangeError`: Setting a value out of range.

        Examples:
            >>> from srecblocks import SrecFile
            >>> file = SrecFile()
            >>> file.maxdatalen
            16
            >>> file.maxdatalen = 0
            Traceback (most recent call last):
                ...
            srecblocks.base.WidthOutOfRangeError: data width out of range: 0
        """

        return self._maxdatalen

    @maxdatalen.setter
    def maxdatalen(self, maxdatalen: int) -> None:

        self._maxdatalen = self._check_width(maxdatalen)

    @classmethod
    def load(
        cls,
        in_path_or_stream: Optional[Union[AnyPath, IO]] = None,
    ) -> 'SrecFile':
        r"""Loads a file object from the filesystem.

        Args:
            in_path_or_stream (str or bytes IO):
                Path of the file within the filesystem, or byte input stream.
                If ``None``, ``sys.stdin.buffer`` is used.

        Returns:
            :class:`SrecFile`: Loaded file object.

        See Also:
            :meth:`parse`
        """

        if in_path_or_stream is None:
            in_path_or_stream = sys.stdin.buffer

        if isinstance(in_path_or_stream, io.IOBase):
            return cls.parse(in_path_or_stream)
        else:
            path = str(in_path_or_stream)
            with open(path, 'rb') as stream:
                return cls.parse(stream)

    @classmethod
    def parse(cls, lines: AnyLines) -> 'SrecFile':
        r"""Parses a file from its lines.

        Blank lines are skipped.
        Each record is validated, then:

        * a *header* record sets :attr:`title`, non-ASCII bytes becoming ``?``;
        * a *data* record extends the current block if contiguous, otherwise
          the first block it continues, otherwise a new block; its data must
          not exceed the 32-bit address range;
        * a *reserved* record is ignored;
        * a *record count* record must match the number of records of the
          current block;
        * a *start address* record must match the type of the preceding
          *data* records, and its address (if not zero) must be the start
          address of a block.

        Args:
            lines (str, bytes, or iterable):
                Sequence of lines, byte stream, or whole text buffer.

        Returns:
            :class:`SrecFile`: Parsed file.

        Raises:
            :class:`LineError`: The first offending line; its
            :attr:`LineError.lineno` holds the 1-based line number.

        Examples:
            >>> from srecblocks import SrecFile
            >>> lines = ['S1050010AABB85', 'S1050020CCDD31', 'S1050012EEFFFB']
            >>> file = SrecFile.parse(lines)
            >>> [(hex(b.start_address), b.data.hex()) for b in file.blocks]
            [('0x10', 'aabbeeff'), ('0x20', 'ccdd')]
        """

        if isinstance(lines, (bytes, bytearray, memoryview)):
            lines = bytes(lines).splitlines()
        elif isinstance(lines, str):
            lines = lines.splitlines()

        Record = cls.Record
        Tag = Record.Tag
        file = cls()
        data_tag: Optional[SrecTag] = None
        block: Optional[SrecBlock] = None

        for lineno, line in enumerate(lines, start=1):
            if cls._is_line_empty(line):
                continue

            try:
                record = Record.parse(line, coords=(lineno, 0))
                record.validate()
            except LineError as exc:
                exc.lineno = lineno
                raise
            except InvalidRecordError as exc:
                raise LineInvalidError(f'invalid record: {exc}', lineno) from exc

            tag = record.tag

            if tag.is_header():
                file.title = bytes(b if b < 0x80 else 0x3F for b in record.data).decode('ascii')

            elif tag.is_data():
                if record.address_value + len(record.data) > ADDRESS_ENDEX:
                    raise LineInvalidError('invalid record: data beyond address range', lineno)
                data_tag = tag
                block = file._fold_data(block, record)

            elif tag == Tag.RESERVED:
                logger.debug(f'line {lineno}: reserved record ignored')

            elif tag.is_count():
                expected = record.data_to_int()
                actual = len(block.records) if block is not None else 0
                if expected != actual:
                    raise CountMismatchError(lineno, expected, actual)

            elif tag.is_start():
                file._check_terminator(lineno, block, data_tag, record)
                data_tag = None

            else:  # pragma: no cover
                raise UnsupportedRecordTypeError(f'unsupported record type: {tag!r}', lineno)

        return file

    def print(
        self,
        stream: Optional[IO] = None,
        color: bool = False,
        end: AnyBytes = b'\r\n',
        maxdatalen: Optional[int] = None,
        count: bool = False,
        terminate: bool = False,
    ) -> 'SrecFile':
        r"""Prints the rendered records.

        Args:
            stream (byte stream):
                Stream to print onto.
                If ``None``, *stdout* is used.

            color (bool):
                Colorize record tokens with ANSI color codes.

            end (bytes):
                Line terminator.

            maxdatalen (int):
                Forwarded to :meth:`render_records`.

            count (bool):
                Forwarded to :meth:`render_records`.

            terminate (bool):
                Forwarded to :meth:`render_records` as `end`.

        Returns:
            :class:`SrecFile`: *self*.
        """

        for record in self.render_records(maxdatalen=maxdatalen, count=count, end=terminate):
            record.print(stream=stream, color=color, end=end)
        return self

    def render(
        self,
        maxdatalen: Optional[int] = None,
        count: bool = False,
        end: bool = False,
    ) -> List[str]:
        r"""Renders the file into lines of text.

        See :meth:`render_records` for the arguments.

        Returns:
            list of str: Serialized records, without line terminators.

        Examples:
            >>> from srecblocks import SrecFile, SrecBlock
            >>> file = SrecFile('HDR', [SrecBlock(0x10, b'abcde')])
            >>> file.render(maxdatalen=4, count=True, end=True)  # doctest: +NORMALIZE_WHITESPACE
            ['S00600004844521B', 'S1070010616263645E', 'S10400146582',
             'S5030002FA', 'S9030010EC']
        """

        records = self.render_records(maxdatalen=maxdatalen, count=count, end=end)
        return [record.to_str() for record in records]

    def render_records(
        self,
        maxdatalen: Optional[int] = None,
        count: bool = False,
        end: bool = False,
    ) -> List[SrecRecord]:
        r"""Renders the file into records.

        The :attr:`title` comes first, as a *header* record.
        Then, for each block, its *data* records as per
        :meth:`SrecBlock.rechunk`, optionally followed by a *record count*
        record and by a termination record.

        The termination record matches the type of the last *data* record of
        the block, and holds the block start address.

        Args:
            maxdatalen (int):
                Maximum *data* field width; :attr:`maxdatalen` if ``None``.

            count (bool):
                Emits a *record count* record after each block.

            end (bool):
                Emits a termination record after each block.

        Returns:
            list of :class:`SrecRecord`: Rendered records.

        Raises:
            :class:`WidthOutOfRangeError`: `maxdatalen` out of range.
        """

        if maxdatalen is None:
            maxdatalen = self.maxdatalen
        else:
            maxdatalen = self._check_width(maxdatalen)

        Record = self.Record
        records = []

        if self.title is not None:
            header = self.title.encode('ascii', errors='replace')
            records.append(Record.create_header(header))

        for block in self.blocks:
            block_records = block.rechunk(maxdatalen)
            records.extend(block_records)

            if count:
                records.append(Record.create_count(len(block_records)))

            if end:
                data_tag = block.get_data_tag()
                if data_tag is None:
                    address = block.start_address.to_bytes(4, 'big')
                    data_tag, _ = fit_address_tag(address)
                start_tag = data_tag.get_tag_match()
                records.append(Record.create_start(block.start_address, tag=start_tag))

        return records

    def save(
        self,
        out_path_or_stream: Optional[Union[AnyPath, IO]] = None,
        *args,
        **kwargs,
    ) -> 'SrecFile':
        r"""Saves a file object into the filesystem.

        Args:
            out_path_or_stream (str or bytes IO):
                Path of the file within the filesystem, or output byte stream.
                If ``None``, ``sys.stdout.buffer`` is used.

            args:
                Forwarded to :meth:`serialize`.

            kwargs:
                Forwarded to :meth:`serialize`.

        Returns:
            :class:`SrecFile`: *self*.
        """

        if out_path_or_stream is None:
            out_path_or_stream = sys.stdout.buffer

        if isinstance(out_path_or_stream, io.IOBase):
            stream = out_path_or_stream
            return self.serialize(stream, *args, **kwargs)
        else:
            path = str(out_path_or_stream)
            with open(path, 'wb') as stream:
                return self.serialize(stream, *args, **kwargs)

    def serialize(
        self,
        stream: IO,
        end: AnyBytes = b'\r\n',
        maxdatalen: Optional[int] = None,
        count: bool = False,
        terminate: bool = False,
    ) -> 'SrecFile':
        r"""Serializes records onto a byte stream.

        Args:
            stream (bytes IO):
                Stream to serialize records onto.

            end (bytes):
                Line terminator.

            maxdatalen (int):
                Forwarded to :meth:`render_records`.

            count (bool):
                Forwarded to :meth:`render_records`.

            terminate (bool):
                Forwarded to :meth:`render_records` as `end`.

        Returns:
            :class:`SrecFile`: *self*.
        """

        for record in self.render_records(maxdatalen=maxdatalen, count=count, end=terminate):
            record.serialize(stream, end=end)
        return self
