import io
import logging
from pathlib import Path

import pytest
from test_base import replace_stdin
from test_base import replace_stdout

from srecblocks.base import CountMismatchError
from srecblocks.base import LineInvalidError
from srecblocks.base import MalformedLineError
from srecblocks.base import NoBlockToTerminateError
from srecblocks.base import TerminatorAddressMismatchError
from srecblocks.base import TerminatorKindMismatchError
from srecblocks.base import UnknownRecordTypeError
from srecblocks.base import WidthOutOfRangeError
from srecblocks.blocks import SrecBlock
from srecblocks.file import SrecFile
from srecblocks.records import SrecRecord
from srecblocks.records import SrecTag


@pytest.fixture
def tmppath(tmpdir):
    return Path(str(tmpdir))


# https://en.wikipedia.org/wiki/SREC_(file_format)#16-bit_memory_address
WIKIPEDIA_LINES = [
    'S00F000068656C6C6F202020202000003C',
    'S11F00007C0802A6900100049421FFF07C6C1B787C8C23783C6000003863000026',
    'S11F001C4BFFFFE5398000007D83637880010014382100107C0803A64E800020E9',
    'S111003848656C6C6F20776F726C642E0A0042',
    'S5030003F9',
    'S9030000FC',
]

SPLICED_LINES = [
    'S1050010AABB85',
    'S1050020CCDD31',
    'S1050012EEFFFB',
]


def _block_items(file):
    return [(block.start_address, block.data) for block in file.blocks]


# ============================================================================

class TestSrecFile:

    def test___init__(self):
        file = SrecFile()
        assert file.title is None
        assert file.blocks == []
        assert file.diagnostics == []
        assert file.maxdatalen == SrecFile.DEFAULT_DATALEN

        blocks = [SrecBlock(0x10, b'abc')]
        file = SrecFile('HDR', blocks)
        assert file.title == 'HDR'
        assert file.blocks == blocks
        assert file.blocks is not blocks

    def test_maxdatalen(self):
        file = SrecFile()
        file.maxdatalen = 1
        assert file.maxdatalen == 1
        file.maxdatalen = 250
        assert file.maxdatalen == 250

        for width in (0, 251):
            with pytest.raises(WidthOutOfRangeError, match='data width out of range'):
                file.maxdatalen = width
        assert file.maxdatalen == 250

    # ------------------------------------------------------------------------

    def test_parse_header_only(self):
        file = SrecFile.parse(['S00600004844521B'])
        assert file.title == 'HDR'
        assert file.blocks == []

    def test_parse_empty(self):
        file = SrecFile.parse([])
        assert file.title is None
        assert file.blocks == []

        file = SrecFile.parse(['', '  ', '\r\n'])
        assert file.title is None
        assert file.blocks == []

    def test_parse_header_latest_wins(self):
        file = SrecFile.parse(['S00600004844521B', 'S0030000FC'])
        assert file.title == ''

    def test_parse_header_non_ascii(self):
        file = SrecFile.parse(['S0050000FF00FB'])
        assert file.title == '?\x00'

    def test_parse_header_non_ascii_roundtrip(self):
        file = SrecFile.parse(['S0050000FF00FB'])
        again = SrecFile.parse(file.render())
        assert again.title == file.title

    def test_parse_scenario(self):
        lines = ['S00600004844521B', 'S108100028500000006F', 'S9030000FC']
        file = SrecFile.parse(lines)
        assert file.title == 'HDR'
        assert _block_items(file) == [(0x1000, b'\x28\x50\x00\x00\x00')]
        assert len(file.blocks[0].records) == 1
        assert file.diagnostics == []

    def test_parse_scenario_bad_checksum(self):
        lines = ['S00600004844521B', 'S1061000285000000039', 'S9030000FC']
        with pytest.raises(LineInvalidError) as excinfo:
            SrecFile.parse(lines)
        assert excinfo.value.lineno == 2
        assert str(excinfo.value) == 'line 2: invalid record: wrong checksum'

    def test_parse_data_beyond_address_range(self):
        lines = ['S00600004844521B', 'S307FFFFFFFF0102F9']
        with pytest.raises(LineInvalidError, match='beyond address range') as excinfo:
            SrecFile.parse(lines)
        assert excinfo.value.lineno == 2

    def test_parse_data_at_address_range_end(self):
        file = SrecFile.parse(['S306FFFFFFFF01FC'])
        assert _block_items(file) == [(0xFFFFFFFF, b'\x01')]
        assert file.blocks[0].next_address == 0x100000000

    def test_parse_splicing(self):
        file = SrecFile.parse(SPLICED_LINES)
        assert _block_items(file) == [
            (0x10, b'\xAA\xBB\xEE\xFF'),
            (0x20, b'\xCC\xDD'),
        ]
        assert len(file.blocks[0].records) == 2
        assert len(file.blocks[1].records) == 1

    def test_parse_splicing_logs(self, caplog):
        caplog.set_level(logging.DEBUG, logger='srecblocks.file')
        SrecFile.parse(SPLICED_LINES)
        messages = [record.getMessage() for record in caplog.records]
        assert 'new block at 0x10' in messages
        assert 'new block at 0x20' in messages
        assert 'splicing record at 0x12 into block at 0x10' in messages

    def test_parse_contiguous(self):
        lines = [
            'S1050010AABB85',
            'S1050012EEFFFB',
            'S9030010EC',
            'S10400146186',
        ]
        file = SrecFile.parse(lines)
        assert _block_items(file) == [(0x10, b'\xAA\xBB\xEE\xFFa')]
        assert len(file.blocks[0].records) == 3

    def test_parse_overlap_new_block(self):
        file = SrecFile.parse(['S1050010AABB85', 'S1050010AABB85'])
        assert _block_items(file) == [
            (0x10, b'\xAA\xBB'),
            (0x10, b'\xAA\xBB'),
        ]

    def test_parse_wikipedia(self):
        file = SrecFile.parse(WIKIPEDIA_LINES)
        assert file.title == 'hello     \x00\x00'
        assert len(file.blocks) == 1
        block = file.blocks[0]
        assert block.start_address == 0x0000
        assert len(block) == 28 + 28 + 14
        assert len(block.records) == 3
        assert block.data.endswith(b'Hello world.\n\x00')

    def test_parse_buffers(self):
        text = 'S00600004844521B\r\nS1050010AABB85\r\n\r\nS9030010EC\r\n'
        vector = [
            text,
            text.encode(),
            bytearray(text.encode()),
            io.BytesIO(text.encode()),
            io.StringIO(text),
            text.splitlines(),
        ]
        for lines in vector:
            file = SrecFile.parse(lines)
            assert file.title == 'HDR'
            assert _block_items(file) == [(0x10, b'\xAA\xBB')]

    def test_parse_count(self):
        lines = ['S1050010AABB85', 'S1050012EEFFFB', 'S5030002FA', 'S9030010EC']
        file = SrecFile.parse(lines)
        assert _block_items(file) == [(0x10, b'\xAA\xBB\xEE\xFF')]

        file = SrecFile.parse(['S5030000FC'])
        assert file.blocks == []

        file = SrecFile.parse(['S1050010AABB85', 'S604000001FA'])
        assert len(file.blocks) == 1

    def test_parse_count_mismatch(self):
        lines = ['S1050010AABB85', 'S1050012EEFFFB', 'S5030003F9']
        with pytest.raises(CountMismatchError) as excinfo:
            SrecFile.parse(lines)
        error = excinfo.value
        assert error.lineno == 3
        assert error.expected == 3
        assert error.actual == 2
        assert str(error) == 'line 3: record count mismatch: expected 3, actual 2'

    def test_parse_count_mismatch_no_block(self):
        with pytest.raises(CountMismatchError) as excinfo:
            SrecFile.parse(['S5030001FB'])
        assert excinfo.value.expected == 1
        assert excinfo.value.actual == 0

    def test_parse_reserved(self, caplog):
        caplog.set_level(logging.DEBUG, logger='srecblocks.file')
        file = SrecFile.parse(['S1050010AABB85', 'S401FE', 'S9030010EC'])
        assert _block_items(file) == [(0x10, b'\xAA\xBB')]
        messages = [record.getMessage() for record in caplog.records]
        assert 'line 2: reserved record ignored' in messages

    def test_parse_reserved_with_data(self):
        with pytest.raises(LineInvalidError, match='unexpected data') as excinfo:
            SrecFile.parse(['S1050010AABB85', 'S40200FD'])
        assert excinfo.value.lineno == 2

    def test_parse_terminator_kind_mismatch(self):
        with pytest.raises(TerminatorKindMismatchError) as excinfo:
            SrecFile.parse(['S206001000636422', 'S9030000FC'])
        assert excinfo.value.lineno == 2

        with pytest.raises(TerminatorKindMismatchError) as excinfo:
            SrecFile.parse(['S9030000FC'])
        assert excinfo.value.lineno == 1

        with pytest.raises(TerminatorKindMismatchError) as excinfo:
            SrecFile.parse(['S1050010AABB85', 'S9030010EC', 'S9030010EC'])
        assert excinfo.value.lineno == 3

    def test_parse_terminator_kinds(self):
        lines = [
            'S206001000636422',
            'S804001000EB',
            'S30812345678616263BD',
            'S70512345678E6',
        ]
        file = SrecFile.parse(lines)
        assert _block_items(file) == [(0x1000, b'cd'), (0x12345678, b'abc')]

    def test_parse_terminator_address_mismatch(self):
        with pytest.raises(TerminatorAddressMismatchError) as excinfo:
            SrecFile.parse(['S1050010AABB85', 'S9030020DC'])
        assert excinfo.value.lineno == 2
        assert 'matches no block' in str(excinfo.value)

    def test_parse_terminator_other_block(self, caplog):
        caplog.set_level(logging.WARNING, logger='srecblocks.file')
        lines = ['S1050010AABB85', 'S1050020CCDD31', 'S9030010EC']
        file = SrecFile.parse(lines)

        expected = ('line 3: termination address 0x10 '
                    'refers to a block other than the current one')
        assert file.diagnostics == [expected]
        assert [r.getMessage() for r in caplog.records] == [expected]
        assert caplog.records[0].levelno == logging.WARNING

    def test_parse_terminator_current_block(self, caplog):
        caplog.set_level(logging.WARNING, logger='srecblocks.file')
        file = SrecFile.parse(['S1050010AABB85', 'S1050020CCDD31', 'S9030020DC'])
        assert file.diagnostics == []
        assert caplog.records == []

    def test_check_terminator_no_block(self):
        file = SrecFile()
        record = SrecRecord.create_start()
        with pytest.raises(NoBlockToTerminateError) as excinfo:
            file._check_terminator(4, None, SrecTag.DATA_16, record)
        assert excinfo.value.lineno == 4

    def test_parse_line_errors(self):
        with pytest.raises(UnknownRecordTypeError) as excinfo:
            SrecFile.parse(['S00600004844521B', 'SA030000FC'])
        assert excinfo.value.lineno == 2

        with pytest.raises(MalformedLineError) as excinfo:
            SrecFile.parse(['S00600004844521B', '', 'S10612'])
        assert excinfo.value.lineno == 3
        assert str(excinfo.value) == 'line 3: line too short'

        with pytest.raises(LineInvalidError) as excinfo:
            SrecFile.parse(['', 'S1050010AABB85', '   ', 'S9030000FD'])
        assert excinfo.value.lineno == 4

    # ------------------------------------------------------------------------

    def test_render(self):
        file = SrecFile('HDR', [SrecBlock(0x10, b'abcde')])
        assert file.render(maxdatalen=4, count=True, end=True) == [
            'S00600004844521B',
            'S1070010616263645E',
            'S10400146582',
            'S5030002FA',
            'S9030010EC',
        ]
        assert file.render(maxdatalen=4) == [
            'S00600004844521B',
            'S1070010616263645E',
            'S10400146582',
        ]

    def test_render_default_width(self):
        file = SrecFile(None, [SrecBlock(0x10, bytes(40))])
        assert [len(line) for line in file.render()] == [42, 42, 26]

        file.maxdatalen = 20
        assert len(file.render()) == 2

    def test_render_scenario(self):
        lines = ['S00600004844521B', 'S108100028500000006F', 'S9030000FC']
        file = SrecFile.parse(lines)
        assert file.render(count=True, end=True) == [
            'S00600004844521B',
            'S20900100028500000006E',
            'S5030001FB',
            'S804001000EB',
        ]

    def test_render_non_ascii_title(self):
        file = SrecFile('hé')
        assert file.render() == ['S0050000683F53']

    def test_render_empty_block(self):
        file = SrecFile(None, [SrecBlock(0x10), SrecBlock(0x12345)])
        assert file.render(count=True, end=True) == [
            'S5030000FC',
            'S9030010EC',
            'S5030000FC',
            'S80401234592',
        ]

    def test_render_raises(self):
        file = SrecFile(None, [SrecBlock(0x10, b'abc')])
        for width in (0, 251):
            with pytest.raises(WidthOutOfRangeError):
                file.render(maxdatalen=width)

    def test_render_records(self):
        file = SrecFile('HDR', [SrecBlock(0x10, b'ab'), SrecBlock(0x1000, b'cd')])
        records = file.render_records(end=True)
        tags = [record.tag for record in records]
        assert tags == [
            SrecTag.HEADER,
            SrecTag.DATA_16,
            SrecTag.START_16,
            SrecTag.DATA_24,
            SrecTag.START_24,
        ]
        assert file.blocks[1].records == [records[3]]

    def test_render_roundtrip(self):
        blocks = [
            SrecBlock(0x10, b'abcde'),
            SrecBlock(0x1000, bytes(range(100))),
            SrecBlock(0x123456, b'xyz'),
        ]
        file = SrecFile('HDR', blocks)

        for width in (1, 7, 16, 250):
            for count in (False, True):
                lines = file.render(maxdatalen=width, count=count, end=True)
                parsed = SrecFile.parse(lines)
                assert parsed.title == file.title
                assert _block_items(parsed) == _block_items(file)
                assert parsed.diagnostics == []

                again = parsed.render(maxdatalen=width, count=count, end=True)
                assert again == lines

    def test_render_roundtrip_no_end(self):
        file = SrecFile.parse(SPLICED_LINES)
        lines = file.render(maxdatalen=8)
        parsed = SrecFile.parse(lines)
        assert _block_items(parsed) == _block_items(file)

    # ------------------------------------------------------------------------

    def test_load_save(self, tmppath):
        path = tmppath / 'test_load_save.s19'
        file = SrecFile.parse(WIKIPEDIA_LINES)
        returned = file.save(path, maxdatalen=28, count=True, terminate=True)
        assert returned is file

        with open(str(path), 'rb') as stream:
            buffer = stream.read()
        expected = ''.join(line + '\r\n' for line in WIKIPEDIA_LINES).encode()
        assert buffer == expected

        loaded = SrecFile.load(str(path))
        assert loaded.title == file.title
        assert _block_items(loaded) == _block_items(file)

    def test_load_stream(self):
        stream = io.BytesIO(b'S00600004844521B\r\nS1050010AABB85\r\n')
        file = SrecFile.load(stream)
        assert file.title == 'HDR'
        assert _block_items(file) == [(0x10, b'\xAA\xBB')]

    def test_load_stdin(self):
        stream = io.BytesIO(b'S1050010AABB85\n')
        with replace_stdin(stream):
            file = SrecFile.load(None)
        assert _block_items(file) == [(0x10, b'\xAA\xBB')]

    def test_save_stdout(self):
        file = SrecFile(None, [SrecBlock(0x10, b'\xAA\xBB')])
        with replace_stdout() as stdout:
            file.save(None, end=b'\n', terminate=True)
        assert stdout.buffer.getvalue() == b'S1050010AABB85\nS9030010EC\n'

    def test_serialize(self):
        file = SrecFile('HDR', [SrecBlock(0x10, b'\xAA\xBB')])
        stream = io.BytesIO()
        returned = file.serialize(stream)
        assert returned is file
        assert stream.getvalue() == b'S00600004844521B\r\nS1050010AABB85\r\n'

        stream = io.BytesIO()
        file.serialize(stream, end=b'\n', maxdatalen=1, count=True, terminate=True)
        assert stream.getvalue() == (b'S00600004844521B\n'
                                     b'S1040010AA41\n'
                                     b'S1040011BB2F\n'
                                     b'S5030002FA\n'
                                     b'S9030010EC\n')

    def test_print(self):
        file = SrecFile('HDR', [SrecBlock(0x10, b'\xAA\xBB')])
        stream = io.BytesIO()
        returned = file.print(stream=stream, terminate=True)
        assert returned is file
        assert stream.getvalue() == b'S00600004844521B\r\nS1050010AABB85\r\nS9030010EC\r\n'

        stream = io.BytesIO()
        file.print(stream=stream, color=True, end=b'\n')
        buffer = stream.getvalue()
        assert b'\x1b[' in buffer
        assert buffer.count(b'\n') == 2

    def test_print_stdout(self):
        file = SrecFile('HDR')
        with replace_stdout() as stdout:
            file.print()
        assert stdout.buffer.getvalue() == b'S00600004844521B\r\n'
