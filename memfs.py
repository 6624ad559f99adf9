# A Unix-like filesystem held entirely in memory, with a current directory
import logging
import sys

from MemTree import Kind, MemTree
from names import CD, PARENT, ROOT, is_invalid, is_reserved

logger = logging.getLogger(__name__)


class MemFS():
    """One tree plus a cursor (`curr_dir`) pointing at a directory in it.

    Every operation takes a single path component. Failures are reported by
    returning False and leave the tree as it was.
    """

    def __init__(self):
        self.tree = None
        self.curr_dir = None
        self.mkfs()

    @property
    def root(self):
        if( self.tree is None ):
            return None
        return self.tree.root

    @property
    def cwd(self):
        if( self.tree is None ):
            return None
        return self.tree.get(self.curr_dir)

    # Lifecycle
    # =========
    def mkfs(self):
        logger.debug("mkfs()")
        if( self.tree is not None ):
            self.teardown()

        try:
            tree = MemTree()
        except MemoryError:
            logger.critical("Not enough memory for allocation. Terminating program.")
            sys.exit(1)

        self.tree = tree
        self.curr_dir = tree.root

    def teardown(self):
        logger.debug("teardown()")
        if( self.tree is None ):
            return
        released = self.tree.clear()
        logger.debug("teardown: released %d nodes", released)
        self.tree = None
        self.curr_dir = None

    # Lookup
    # ======
    def resolve(self, name, assign=True):
        """Look `name` up among the entries of the current directory.

        Returns (node, found). With assign=False only the flag is computed
        and node is always None.
        """
        if( self.tree is None or name is None ):
            return None, False
        node = self.tree.find(self.curr_dir, name)
        if( node is None ):
            return None, False
        if not assign:
            return None, True
        return node, True

    # Creation
    # ========
    def touch(self, name):
        logger.debug("touch(%s)", name)
        if( self.tree is None or name is None ):
            return False

        # Reserved tokens and existing names are both quiet successes
        if( is_reserved(name) or self.resolve(name, assign=False)[1] ):
            return True

        if( is_invalid(name) ):
            logger.debug("touch: invalid name %r", name)
            return False

        return self._add(name, Kind.FILE)

    def mkdir(self, name):
        logger.debug("mkdir(%s)", name)
        if( self.tree is None or name is None ):
            return False

        if( is_reserved(name) or self.resolve(name, assign=False)[1] ):
            logger.debug("mkdir: %r is reserved or already exists", name)
            return False

        if( is_invalid(name) ):
            logger.debug("mkdir: invalid name %r", name)
            return False

        return self._add(name, Kind.DIRECTORY)

    def _add(self, name, kind):
        try:
            self.tree.insert(self.curr_dir, name, kind)
        except MemoryError:
            logger.error("Not enough memory to create %r", name)
            return False
        return True

    # Navigation
    # ==========
    def cd(self, name):
        logger.debug("cd(%s)", name)
        if( self.tree is None or name is None ):
            return False

        if( name == "" or name == CD ):
            return True

        # The root is its own parent, so this stops at the top
        if( name == PARENT ):
            self.curr_dir = self.cwd.parent
            return True

        if( name == ROOT ):
            self.curr_dir = self.tree.root
            return True

        node, found = self.resolve(name)
        if not found:
            logger.debug("cd: no such directory %r", name)
            return False
        if not node.is_dir:
            logger.debug("cd: %r is a file", name)
            return False

        self.curr_dir = node.handle
        return True

    # Presentation
    # ============
    def entries(self, name=""):
        """The nodes `ls(name)` would print, or None when it would fail."""
        if( self.tree is None or name is None ):
            return None

        if( name == "" or name == CD ):
            target = self.curr_dir
        elif( name == PARENT ):
            target = self.cwd.parent
        elif( name == ROOT ):
            target = self.tree.root
        else:
            node, found = self.resolve(name)
            if not found:
                return None
            if not node.is_dir:
                return [node]
            target = node.handle

        return list(self.tree.children(target))

    def ls(self, name="", out=None):
        logger.debug("ls(%s)", name)
        nodes = self.entries(name)
        if( nodes is None ):
            logger.debug("ls: cannot access %r", name)
            return False

        if( out is None ):
            out = sys.stdout
        for node in nodes:
            out.write(node.render() + "\n")
        return True

    def path(self):
        if( self.tree is None ):
            return None
        return self.tree.path(self.curr_dir)

    def pwd(self, out=None):
        logger.debug("pwd()")
        path = self.path()
        if( path is None ):
            return
        if( out is None ):
            out = sys.stdout
        out.write(path + "\n")

    # Deletion
    # ========
    def rm(self, name):
        logger.debug("rm(%s)", name)
        if( self.tree is None or name is None ):
            return False

        if( is_reserved(name) or is_invalid(name) ):
            logger.debug("rm: refusing %r", name)
            return False

        node, found = self.resolve(name)
        if not found:
            logger.debug("rm: no such entry %r", name)
            return False

        # Never strand the cursor inside a released subtree
        if( self.tree.is_ancestor(node.handle, self.curr_dir) ):
            logger.debug("rm: %r contains the current directory", name)
            return False

        released = self.tree.remove(node.handle)
        logger.debug("rm: released %d nodes under %r", released, name)
        return True

    def check(self):
        """Consistency report for the tree and the cursor; empty when sound."""
        if( self.tree is None ):
            return []
        problems = self.tree.check()
        node = self.tree.nodes[self.curr_dir] if self.curr_dir is not None else None
        if( node is None ):
            problems.append("cursor does not point at a live node")
        elif not node.is_dir:
            problems.append("cursor points at file %r" % node.name)
        return problems

    # Names used elsewhere for the same operations. `list` shadows the
    # builtin for the rest of this class body, keep these last.
    initialize = mkfs
    create_file = touch
    create_dir = mkdir
    change_dir = cd
    list = ls
    print_path = pwd
    remove = rm


def walk(fs, parts):
    """Move the cursor from the root down through `parts`, one cd at a time.

    On failure the cursor goes back to where it started.
    """
    if( fs.tree is None ):
        return False

    start = fs.curr_dir
    fs.cd(ROOT)
    for part in parts:
        if( is_reserved(part) or not fs.cd(part) ):
            fs.curr_dir = start
            return False
    return True
