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

r"""Contiguous memory blocks."""

from typing import List
from typing import Optional
from typing import Type

from bytesparse import Memory

from .base import AnyBytes
from .base import NormalizationFailedError
from .base import WidthOutOfRangeError
from .records import SrecRecord
from .records import SrecTag


class SrecBlock:
    r"""Contiguous block of memory.

    A block holds the bytes of a single contiguous address range, starting at
    :attr:`start_address`, together with the *data* records currently backing
    them.

    The bytes are stored within a :class:`bytesparse.Memory` object, which is
    only ever extended at :attr:`next_address`, so that it never gets holes.

    The :attr:`records` list is meant for provenance and debugging: it holds
    the records folded in while parsing, or the ones built by the latest
    :meth:`rechunk` call.

    Args:
        start_address (int):
            See :attr:`start_address`.

        data (bytes):
            Initial block data.

    Attributes:
        start_address (int):
            Address of the first byte.

        memory (:class:`bytesparse.Memory`):
            Underlying memory object.

        records (list of :class:`SrecRecord`):
            *Data* records backing the block.

    Examples:
        >>> from srecblocks.blocks import SrecBlock
        >>> block = SrecBlock(0x1000, b'abc')
        >>> hex(block.next_address), hex(block.end_address)
        ('0x1003', '0x1002')
        >>> [str(r) for r in block.rechunk(2)]
        ['S205001000616227', 'S2040010026386']
    """

    MAX_WIDTH: int = 250
    r"""Maximum *data* field width for :meth:`rechunk`."""

    MIN_WIDTH: int = 1
    r"""Minimum *data* field width for :meth:`rechunk`."""

    Record: Type[SrecRecord] = SrecRecord

    def __init__(self, start_address: int = 0, data: AnyBytes = b''):

        start_address = start_address.__index__()
        if not 0 <= start_address <= 0xFFFFFFFF or start_address + len(data) > 0x100000000:
            raise ValueError('address overflow')

        self.start_address: int = start_address
        self.memory: Memory = Memory()
        self.records: List[SrecRecord] = []

        if data:
            self.memory.write(start_address, data)

    def __len__(self) -> int:

        return len(self.memory)

    def __repr__(self) -> str:

        return (f'<{self.__class__.__name__} '
                f'start=0x{self.start_address:08X} '
                f'size={len(self)} '
                f'records={len(self.records)}>')

    def append(self, record: SrecRecord) -> 'SrecBlock':
        r"""Appends a data record.

        The record *data* are appended to the block bytes, and the record
        itself to :attr:`records`.

        Args:
            record (:class:`SrecRecord`):
                *Data* record, addressed at :attr:`next_address`.

        Returns:
            :class:`SrecBlock`: *self*.

        Raises:
            ValueError: The record does not continue the block, or its data
                exceed the 32-bit address range.
        """

        address = record.address_value
        if address != self.next_address:
            raise ValueError(f'record address 0x{address:X} not contiguous')
        if address + len(record.data) > 0x100000000:
            raise ValueError('address overflow')

        if record.data:
            self.memory.write(address, record.data)
        self.records.append(record)
        return self

    @property
    def data(self) -> bytes:
        r"""bytes: Block data."""

        if not self.memory:
            return b''
        return self.memory.to_bytes()

    @property
    def end_address(self) -> int:
        r"""int: Inclusive address of the last byte."""

        return self.next_address - 1

    def get_data_tag(self) -> Optional[SrecTag]:
        r"""Tag of the last backing record, or ``None``."""

        if self.records:
            return self.records[-1].tag
        return None

    @property
    def next_address(self) -> int:
        r"""int: Address right after the last byte."""

        return self.start_address + len(self.memory)

    def rechunk(self, width: int) -> List[SrecRecord]:
        r"""Splits the block into data records.

        The block bytes are chopped into chunks of `width` bytes (the last one
        may be shorter), each becoming a normalized *data* record.
        The record tag depends on the chunk address, as per
        :meth:`SrecRecord.normalize`.

        :attr:`records` is replaced by the new records.

        Args:
            width (int):
                Maximum size of the *data* field of each record.

        Returns:
            list of :class:`SrecRecord`: The new records.

        Raises:
            :class:`WidthOutOfRangeError`: `width` out of range.
            :class:`NormalizationFailedError`: Cannot build a valid record.
        """

        width = width.__index__()
        if not self.MIN_WIDTH <= width <= self.MAX_WIDTH:
            raise WidthOutOfRangeError(f'data width out of range: {width}')

        Record = self.Record
        records = []
        chunk_views = []
        try:
            for chunk_start, chunk_view in self.memory.chop(width):
                chunk_views.append(chunk_view)
                record = Record(Record.Tag.DATA_16, data=bytes(chunk_view))
                record.address_value = chunk_start

                if not record.normalize():
                    raise NormalizationFailedError(f'cannot normalize record at 0x{chunk_start:X}')
                records.append(record)

        finally:
            for chunk_view in chunk_views:
                chunk_view.release()

        self.records = records
        return records
