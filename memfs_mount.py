#!/usr/bin/env python
import logging
import os
import sys

from fuse import FUSE

from fuse_logic import MemFSOperations
from memfs import MemFS
from memfs_config import load_config, mount_options
from tracer import traceFS


def main(mountpoint, fs, options):
    # One callback at a time: every callback moves fs.curr_dir
    options = dict(options, nothreads=True)
    FUSE(MemFSOperations(fs), mountpoint, **options)


def run(argv=None):
    if( argv is None ):
        argv = sys.argv
    if( len(argv) != 2 ):
        sys.stderr.write("usage: %s MOUNTPOINT\n" % os.path.basename(argv[0]))
        return 2

    # Locate and read memfs.toml
    config = load_config()
    logging.basicConfig(level=config["logging"]["level"].upper())

    # Every seed directory is traced into the same tree
    fs = MemFS()
    for d in config["Seed"]["paths"]:
        traceFS(os.path.join(os.getcwd(), d), fs)

    main(argv[1], fs, mount_options(config))
    return 0


if __name__ == '__main__':
    sys.exit(run())
