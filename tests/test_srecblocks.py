import srecblocks
from srecblocks.base import SrecError
from srecblocks.blocks import SrecBlock
from srecblocks.file import SrecFile
from srecblocks.records import SrecRecord
from srecblocks.records import SrecTag


def test_version():
    assert isinstance(srecblocks.__version__, str)
    assert srecblocks.__version__.count('.') == 2


def test_exports():
    assert srecblocks.SrecBlock is SrecBlock
    assert srecblocks.SrecError is SrecError
    assert srecblocks.SrecFile is SrecFile
    assert srecblocks.SrecRecord is SrecRecord
    assert srecblocks.SrecTag is SrecTag

    errors = [name for name in dir(srecblocks) if name.endswith('Error')]
    assert len(errors) == 14
    for name in errors:
        assert issubclass(getattr(srecblocks, name), SrecError)


def test_class_attributes():
    assert SrecFile.Block is SrecBlock
    assert SrecFile.Record is SrecRecord
    assert SrecBlock.Record is SrecRecord
    assert SrecRecord.Tag is SrecTag
