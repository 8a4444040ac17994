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

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m srecblocks` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``srecblocks.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``srecblocks.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
from typing import Callable
from typing import Mapping
from typing import Optional

import click

from .__init__ import __version__
from .base import SrecError
from .file import SrecFile
from .utils import hexlify
from .utils import parse_int
from .utils import unhexlify


class BasedIntParamType(click.ParamType):
    name = 'integer'

    def convert(self, value, param, ctx):
        try:
            return parse_int(value)
        except ValueError:
            self.fail(f'invalid integer: {value!r}', param, ctx)


BASED_INT = BasedIntParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)
FILE_PATH_OUT = click.Path(dir_okay=False, allow_dash=True, writable=True)

DATA_FMT_FORMATTERS: Mapping[str, Callable[[bytes], bytes]] = {
    'ascii': lambda b: b,
    'hex': lambda b: hexlify(b, upper=False),
    'HEX': lambda b: hexlify(b, upper=True),
    'hex-': lambda b: hexlify(b, sep=b'-', upper=False),
    'HEX-': lambda b: hexlify(b, sep=b'-', upper=True),
    'hex ': lambda b: hexlify(b, sep=b' ', upper=False),
    'HEX ': lambda b: hexlify(b, sep=b' ', upper=True),
}

DATA_FMT_PARSERS: Mapping[str, Callable[[bytes], bytes]] = {
    'ascii': lambda b: b,
    'hex': lambda b: unhexlify(b),
    'HEX': lambda b: unhexlify(b),
    'hex-': lambda b: unhexlify(b, delete=b'-'),
    'HEX-': lambda b: unhexlify(b, delete=b'-'),
    'hex ': lambda b: unhexlify(b, delete=b' \t'),
    'HEX ': lambda b: unhexlify(b, delete=b' \t'),
}

DATA_FMT_CHOICE = click.Choice(list(DATA_FMT_FORMATTERS.keys()))


# ----------------------------------------------------------------------------

def load_file(input_path: Optional[str]) -> SrecFile:

    if input_path == '-':
        input_path = None
    try:
        return SrecFile.load(input_path)
    except SrecError as exc:
        raise click.ClickException(str(exc)) from exc


def save_file(
    file: SrecFile,
    output_path: str,
    width: Optional[int] = None,
    count: bool = False,
    end: bool = True,
) -> None:

    try:
        records = file.render_records(maxdatalen=width, count=count, end=end)
    except SrecError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_path == '-':
        stream = click.get_binary_stream('stdout')
        for record in records:
            record.serialize(stream)
    else:
        with open(output_path, 'wb') as stream:
            for record in records:
                record.serialize(stream)


def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


# ============================================================================

@click.group()
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="""
    Prints the package version number.
""")
@click.option('-v', '--verbose', is_flag=True, help="""
    Logs debug messages onto the standard error.
""")
def main(verbose: bool) -> None:
    """
    A set of command line utilities for Motorola S-record files.

    Being built with `Click <https://click.palletsprojects.com/en/stable/>`_, all the
    commands follow POSIX-like syntax rules, as well as reserving the virtual
    file path ``-`` for command chaining via standard output/input buffering.
    """

    logging.basicConfig(
        level=(logging.DEBUG if verbose else logging.WARNING),
        format='%(levelname)s: %(message)s',
    )


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN)
def blocks(
    infile: str,
) -> None:
    r"""Lists the memory blocks.

    Each line shows the start address, the inclusive end address, the size,
    and the number of data records of a block, in order of creation.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_file(infile)

    for block in file.blocks:
        click.echo(f'0x{block.start_address:08X} '
                   f'0x{block.end_address:08X} '
                   f'{len(block)} '
                   f'{len(block.records)}')


# ----------------------------------------------------------------------------

@main.command()
@click.option('-w', '--width', type=BASED_INT, help="""
    Sets the length of the record data field, in bytes.
""")
@click.option('--count/--no-count', default=False, show_default=True, help="""
    Emits a record count record after each block.
""")
@click.option('--end/--no-end', default=True, show_default=True, help="""
    Emits a termination record after each block.
""")
@click.argument('infile', type=FILE_PATH_IN)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def convert(
    width: Optional[int],
    count: bool,
    end: bool,
    infile: str,
    outfile: Optional[str],
) -> None:
    r"""Re-chunks a file into records of the given width.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` to write to standard output.
    Leave empty to overwrite ``INFILE``.
    """

    file = load_file(infile)
    save_file(file, outfile or infile, width=width, count=count, end=end)


# ----------------------------------------------------------------------------

# noinspection PyShadowingBuiltins
@main.command()
@click.option('-f', '--format', 'format', type=DATA_FMT_CHOICE,
              default='ascii', show_default=True, help="""
    Header data format.
""")
@click.argument('infile', type=FILE_PATH_IN)
def get_header(
    format: str,
    infile: str,
) -> None:
    r"""Gets the header data.

    Nothing is printed if the file has no header record.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_file(infile)

    if file.title is not None:
        formatter = DATA_FMT_FORMATTERS[format]
        text = formatter(file.title.encode('ascii', errors='replace')).decode()
        click.echo(text)


# ----------------------------------------------------------------------------

@main.command(name='print')
@click.option('--color/--no-color', default=False, show_default=True, help="""
    Colorizes record fields with ANSI codes.
""")
@click.option('-w', '--width', type=BASED_INT, help="""
    Sets the length of the record data field, in bytes.
""")
@click.option('--count/--no-count', default=False, show_default=True, help="""
    Emits a record count record after each block.
""")
@click.option('--end/--no-end', default=True, show_default=True, help="""
    Emits a termination record after each block.
""")
@click.argument('infile', type=FILE_PATH_IN)
def print_(
    color: bool,
    width: Optional[int],
    count: bool,
    end: bool,
    infile: str,
) -> None:
    r"""Prints the re-chunked records.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_file(infile)
    stream = click.get_binary_stream('stdout')
    try:
        file.print(stream=stream, color=color, end=b'\n',
                   maxdatalen=width, count=count, terminate=end)
    except SrecError as exc:
        raise click.ClickException(str(exc)) from exc


# ----------------------------------------------------------------------------

# noinspection PyShadowingBuiltins
@main.command()
@click.option('-f', '--format', 'format', type=DATA_FMT_CHOICE,
              default='ascii', show_default=True, help="""
    Header data format.
""")
@click.option('-w', '--width', type=BASED_INT, help="""
    Sets the length of the record data field, in bytes.
""")
@click.argument('header', type=str)
@click.argument('infile', type=FILE_PATH_IN)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def set_header(
    format: str,
    width: Optional[int],
    header: str,
    infile: str,
    outfile: Optional[str],
) -> None:
    r"""Sets the header data.

    The file is re-rendered, with a termination record after each block.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` to write to standard output.
    Leave empty to overwrite ``INFILE``.
    """

    parser = DATA_FMT_PARSERS[format]
    try:
        header_data = parser(header.encode())
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint='HEADER') from exc

    file = load_file(infile)
    file.title = bytes(b if b < 0x80 else 0x3F for b in header_data).decode('ascii')
    save_file(file, outfile or infile, width=width)


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN)
def validate(
    infile: str,
) -> None:
    r"""Validates a record file.

    Any errors are reported, with the offending line number.
    Non-fatal issues are logged as warnings.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    load_file(infile)
