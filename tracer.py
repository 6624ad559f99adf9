# Copy the layout (names only) of a real directory into a MemFS
import logging
import os

from memfs import MemFS, walk

logger = logging.getLogger(__name__)


def traceFS(rootdir, fs=None):
    if( fs is None ):
        fs = MemFS()

    rootdir = os.path.abspath(rootdir)
    for root, subFolders, files in os.walk(rootdir):
        rel = os.path.relpath(root, rootdir)
        parts = [] if rel == os.curdir else rel.split(os.sep)

        if not walk(fs, parts):
            logger.warning("Skipped %s: %s is not a directory in the tree", root, "/".join(parts))
            subFolders[:] = []
            continue

        entered = []
        for d in subFolders:
            # Already there as a directory is fine, the two trees merge
            if not fs.mkdir(d):
                node, found = fs.resolve(d)
                if not found or not node.is_dir:
                    logger.warning("Skipped %s: cannot create it in the tree", os.path.join(root, d))
                    continue
            entered.append(d)
        subFolders[:] = entered

        for f in files:
            node, found = fs.resolve(f)
            if( found and node.is_dir ):
                logger.warning("Skipped %s: a directory of that name exists", os.path.join(root, f))
                continue
            fs.touch(f)

    logger.info("Traced %s (%d entries)", rootdir, fs.tree.size())
    fs.cd("/")
    return fs
