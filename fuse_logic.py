#!/usr/bin/env python
# Expose a MemFS through FUSE
import errno
import logging
import os
import stat
import time

from fuse import FuseOSError, Operations

from names import is_invalid, is_reserved

logger = logging.getLogger(__name__)


class MemFSOperations(Operations):
    def __init__(self, fs):
        self.fs = fs
        self.uid = os.getuid()
        self.gid = os.getgid()
        self.mounted = time.time()

    # Helpers
    # =======
    def _split(self, path):
        return [p for p in path.split("/") if p != ""]

    def _enter(self, parts):
        # Goes through cd one component at a time, the core never sees a path
        self.fs.cd("/")
        for part in parts:
            node, found = self.fs.resolve(part)
            if not found:
                raise FuseOSError(errno.ENOENT)
            if not node.is_dir:
                raise FuseOSError(errno.ENOTDIR)
            self.fs.cd(part)

    def _lookup(self, path):
        parts = self._split(path)
        if not parts:
            self.fs.cd("/")
            return self.fs.cwd

        self._enter(parts[:-1])
        node, found = self.fs.resolve(parts[-1])
        if not found:
            raise FuseOSError(errno.ENOENT)
        return node

    def _parent(self, path):
        """cd into the directory holding `path` and return the last component."""
        parts = self._split(path)
        if not parts:
            raise FuseOSError(errno.EBUSY)

        name = parts[-1]
        if( is_reserved(name) or is_invalid(name) ):
            raise FuseOSError(errno.EINVAL)
        self._enter(parts[:-1])
        return name

    def _stat(self, node):
        st = dict(st_uid=self.uid, st_gid=self.gid, st_size=0,
                  st_atime=self.mounted, st_mtime=self.mounted, st_ctime=self.mounted)
        if node.is_dir:
            subdirs = sum(1 for c in self.fs.tree.children(node.handle) if c.is_dir)
            st.update(st_mode=(stat.S_IFDIR | 0o755), st_nlink=2 + subdirs)
        else:
            st.update(st_mode=(stat.S_IFREG | 0o644), st_nlink=1)
        return st

    # Filesystem methods
    # ==================
    def access(self, path, mode):
        logger.debug("access(self, %s, %s)", path, mode)
        self._lookup(path)
        return 0

    def getattr(self, path, fh=None):
        logger.debug("getattr(self, %s, %s)", path, fh)
        return self._stat(self._lookup(path))

    def readdir(self, path, fh):
        logger.debug("readdir(self, %s, %s)", path, fh)
        node = self._lookup(path)
        if not node.is_dir:
            raise FuseOSError(errno.ENOTDIR)

        dirents = ['.', '..']
        dirents.extend(child.name for child in self.fs.tree.children(node.handle))
        return dirents

    def mkdir(self, path, mode):
        logger.debug("mkdir(self, %s, %s)", path, mode)
        name = self._parent(path)
        if( self.fs.resolve(name, assign=False)[1] ):
            raise FuseOSError(errno.EEXIST)
        if not self.fs.mkdir(name):
            raise FuseOSError(errno.ENOMEM)
        return 0

    def rmdir(self, path):
        logger.debug("rmdir(self, %s)", path)
        name = self._parent(path)
        node, found = self.fs.resolve(name)
        if not found:
            raise FuseOSError(errno.ENOENT)
        if not node.is_dir:
            raise FuseOSError(errno.ENOTDIR)
        if( node.first_child is not None ):
            raise FuseOSError(errno.ENOTEMPTY)
        self.fs.rm(name)
        return 0

    def unlink(self, path):
        logger.debug("unlink(self, %s)", path)
        name = self._parent(path)
        node, found = self.fs.resolve(name)
        if not found:
            raise FuseOSError(errno.ENOENT)
        if node.is_dir:
            raise FuseOSError(errno.EISDIR)
        self.fs.rm(name)
        return 0

    def statfs(self, path):
        logger.debug("statfs(self, %s)", path)
        return dict(f_bsize=512, f_frsize=512, f_blocks=0, f_bfree=0, f_bavail=0,
                    f_files=len(self.fs.tree), f_ffree=0, f_favail=0, f_namemax=255)

    def utimens(self, path, times=None):
        logger.debug("utimens(self, %s, %s)", path, times)
        # No timestamps are kept
        self._lookup(path)
        return 0

    def chmod(self, path, mode):
        logger.debug("chmod(self, %s, %s)", path, mode)
        raise FuseOSError(errno.EACCES)

    def chown(self, path, uid, gid):
        logger.debug("chown(self, %s, %s, %s)", path, uid, gid)
        raise FuseOSError(errno.EACCES)

    def mknod(self, path, mode, dev):
        logger.debug("mknod(self, %s, %s, %s)", path, mode, dev)
        raise FuseOSError(errno.EACCES)

    def symlink(self, name, target):
        logger.debug("symlink(self, %s, %s)", name, target)
        raise FuseOSError(errno.EACCES)

    def rename(self, old, new):
        logger.debug("rename(self, %s, %s)", old, new)
        raise FuseOSError(errno.EACCES)

    def link(self, target, name):
        logger.debug("link(self, %s, %s)", target, name)
        raise FuseOSError(errno.EACCES)

    # File methods
    # ============
    def create(self, path, mode, fi=None):
        logger.debug("create(self, %s, %s, %s)", path, mode, fi)
        name = self._parent(path)
        node, found = self.fs.resolve(name)
        if( found and node.is_dir ):
            raise FuseOSError(errno.EISDIR)
        if not self.fs.touch(name):
            raise FuseOSError(errno.ENOMEM)
        return 0

    def open(self, path, flags):
        logger.debug("open(self, %s, %s)", path, flags)
        node = self._lookup(path)
        if node.is_dir:
            raise FuseOSError(errno.EISDIR)
        return 0

    def read(self, path, length, offset, fh):
        logger.debug("read(self, %s, %s, %s, %s)", path, length, offset, fh)
        # Files are names only, there is never any content
        return b""

    def write(self, path, buf, offset, fh):
        logger.debug("write(self, %s, %s, %s, %s)", path, len(buf), offset, fh)
        raise FuseOSError(errno.EACCES)

    def truncate(self, path, length, fh=None):
        logger.debug("truncate(self, %s, %s, %s)", path, length, fh)
        self._lookup(path)
        if( length != 0 ):
            raise FuseOSError(errno.EACCES)
        return 0

    def flush(self, path, fh):
        logger.debug("flush(self, %s, %s)", path, fh)
        return 0

    def release(self, path, fh):
        logger.debug("release(self, %s, %s)", path, fh)
        return 0

    def fsync(self, path, fdatasync, fh):
        logger.debug("fsync(self, %s, %s, %s)", path, fdatasync, fh)
        return self.flush(path, fh)
