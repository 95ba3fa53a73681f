#!/usr/bin/env python3
'''
Hide messages inside a PNG file as chunks of a custom type.

 $ pnghide.py encode image.png ruSt 'this is a secret'
 $ pnghide.py decode image.png ruSt
 $ pnghide.py remove image.png ruSt
 $ pnghide.py print image.png
'''
import logging
import os
import sys

from pngchunks.exceptions import PNGChunksException
from pngchunks.png.api import (
    parse,
    serialize,
    append,
    remove,
)
from pngchunks.png.utils import get_chunk_by_name


logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} encode <png file path> <chunk type> <message> [<output path>]')
    print(f'       {progname} decode <png file path> <chunk type>')
    print(f'       {progname} remove <png file path> <chunk type>')
    print(f'       {progname} print <png file path>')

    return 1


def read_png(path):
    with open(path, 'rb') as f:
        return parse(f.read())


def write_png(path, png):
    with open(path, 'wb') as f:
        f.write(serialize(png))


def cmd_encode(path, chunk_type, message, output=None):
    png = append(read_png(path), chunk_type, message.encode('utf-8'))
    write_png(output or path, png)


def cmd_decode(path, chunk_type):
    chunk = get_chunk_by_name(read_png(path).chunks, chunk_type)
    print(chunk.data_as_string())


def cmd_remove(path, chunk_type):
    png, data = remove(read_png(path), chunk_type)
    write_png(path, png)
    logger.info(f'removed {len(data)} bytes from {path}')


def cmd_print(path):
    png = read_png(path)

    for idx, chunk in enumerate(png.chunks):
        print(f'[{idx:02d}] {chunk}')


COMMANDS = {
    'encode': (cmd_encode, (3, 4)),
    'decode': (cmd_decode, (2,)),
    'remove': (cmd_remove, (2,)),
    'print': (cmd_print, (1,)),
}


def main(argv):
    if len(argv) < 2 or argv[1] not in COMMANDS:
        return usage(argv[0])

    command, n_args = COMMANDS[argv[1]]
    args = argv[2:]

    if len(args) not in n_args:
        return usage(argv[0])

    try:
        command(*args)
    except PNGChunksException as e:
        logger.error(f'{argv[1]} failed: {e}')
        return 2

    return 0


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)
    sys.exit(main(sys.argv))
