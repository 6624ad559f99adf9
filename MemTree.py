# The node tree behind a MemFS.
#
# Nodes live in an arena and refer to each other by integer handle. Every
# directory (the root included) keeps its entries as a doubly linked list
# sorted by name, headed by first_child.
from enum import Enum

from names import ROOT, is_invalid, is_reserved


class Kind(Enum):
    ROOT = "root"
    FILE = "file"
    DIRECTORY = "directory"


class Node():
    __slots__ = ("handle", "name", "kind", "parent", "next", "prev", "first_child")

    def __init__(self, handle, name, kind, parent):
        self.handle = handle
        self.name = name
        self.kind = kind
        self.parent = parent
        self.next = None
        self.prev = None
        self.first_child = None

    @property
    def is_dir(self):
        return self.kind is not Kind.FILE

    def render(self):
        if( self.kind is Kind.DIRECTORY ):
            return self.name + "/"
        return self.name

    def __repr__(self):
        return "Node(%d, %r, %s)" % (self.handle, self.name, self.kind.value)


class MemTree():
    def __init__(self):
        self.nodes = []
        self.free = []
        self.live = 0

        root = self.alloc(ROOT, Kind.ROOT, None)
        root.parent = root.handle
        self.root = root.handle

    def __len__(self):
        return self.live

    def size(self):
        """Number of entries below the root."""
        if( self.root is None ):
            return 0
        return self.live - 1

    # Arena
    # =====
    def alloc(self, name, kind, parent):
        if self.free:
            handle = self.free.pop()
            node = Node(handle, name, kind, parent)
            self.nodes[handle] = node
        else:
            node = Node(len(self.nodes), name, kind, parent)
            self.nodes.append(node)
        self.live += 1
        return node

    def release(self, handle):
        if( handle < 0 or handle >= len(self.nodes) or self.nodes[handle] is None ):
            raise ValueError("node %d released twice" % handle)
        self.nodes[handle] = None
        self.free.append(handle)
        self.live -= 1

    def get(self, handle):
        node = self.nodes[handle]
        if( node is None ):
            raise KeyError(handle)
        return node

    def _at(self, handle):
        if( handle is None ):
            return None
        return self.nodes[handle]

    # Lists
    # =====
    def children(self, handle):
        node = self._at(self.get(handle).first_child)
        while node is not None:
            yield node
            node = self._at(node.next)

    def find(self, handle, name):
        for child in self.children(handle):
            if( child.name == name ):
                return child
            # Sorted, nothing further along can match
            if( child.name > name ):
                break
        return None

    def _splice_in(self, parent, node, prev, next):
        node.parent = parent.handle
        node.prev = prev.handle if prev is not None else None
        node.next = next.handle if next is not None else None

        if( prev is None ):
            parent.first_child = node.handle
        else:
            prev.next = node.handle
        if( next is not None ):
            next.prev = node.handle

    def _splice_out(self, node):
        parent = self.nodes[node.parent]

        if( node.prev is None ):
            parent.first_child = node.next
        else:
            self.nodes[node.prev].next = node.next
        if( node.next is not None ):
            self.nodes[node.next].prev = node.prev

        node.next = None
        node.prev = None

    # Mutation
    # ========
    def insert(self, handle, name, kind):
        """Create a `kind` node called `name` under directory `handle`.

        The new node goes right before the first sibling whose name is not
        smaller, so the list stays sorted. Raises ValueError for a file
        parent, an illegal name or a name already taken.
        """
        parent = self.get(handle)
        if not parent.is_dir:
            raise ValueError("%r is not a directory" % parent.name)
        if( kind is Kind.ROOT ):
            raise ValueError("a tree has exactly one root")
        if( is_reserved(name) or is_invalid(name) ):
            raise ValueError("illegal name %r" % name)

        prev = None
        curr = self._at(parent.first_child)
        while curr is not None and curr.name < name:
            prev = curr
            curr = self._at(curr.next)

        if( curr is not None and curr.name == name ):
            raise ValueError("%r already exists" % name)

        # Allocate before touching any link so a failure leaves the list intact
        node = self.alloc(name, kind, parent.handle)
        self._splice_in(parent, node, prev, curr)
        return node

    def remove(self, handle):
        """Detach `handle` and release it together with everything below it.

        Returns the number of nodes released.
        """
        node = self.get(handle)
        if( handle == self.root ):
            raise ValueError("the root cannot be removed")
        self._splice_out(node)
        return self._release_subtree(handle)

    def clear(self):
        if( self.root is None ):
            return 0
        released = self._release_subtree(self.root)
        self.root = None
        return released

    def _release_subtree(self, handle):
        # Post-order on an explicit stack: a node is released on its second
        # visit, after every child pushed on the first one.
        released = 0
        stack = [(handle, False)]
        while stack:
            h, expanded = stack.pop()
            node = self.nodes[h]
            if not expanded and node.first_child is not None:
                stack.append((h, True))
                stack.extend((child.handle, False) for child in self.children(h))
                continue
            self.release(h)
            released += 1
        return released

    # Traversal
    # =========
    def lineage(self, handle):
        """Yield `handle`'s node, then each ancestor up to and including the root."""
        node = self.get(handle)
        while True:
            yield node
            if( node.handle == self.root ):
                return
            node = self.nodes[node.parent]

    def is_ancestor(self, ancestor, handle):
        return any(node.handle == ancestor for node in self.lineage(handle))

    def path(self, handle):
        names = [node.name for node in self.lineage(handle) if node.kind is not Kind.ROOT]
        return ROOT + "/".join(reversed(names))

    def check(self):
        """Walk the whole tree and report every broken invariant.

        Returns a list of messages, empty when the tree is consistent.
        """
        problems = []
        if( self.root is None ):
            if self.live:
                problems.append("%d nodes alive without a root" % self.live)
            return problems

        root = self.nodes[self.root]
        if( root is None or root.kind is not Kind.ROOT ):
            return ["root handle %d does not hold a root" % self.root]
        if( root.parent != root.handle ):
            problems.append("root parent is %r, not itself" % root.parent)
        if( root.next is not None or root.prev is not None ):
            problems.append("root has siblings")

        seen = set([root.handle])
        stack = [root]
        while stack:
            parent = stack.pop()
            if not parent.is_dir:
                if( parent.first_child is not None ):
                    problems.append("file %r has children" % parent.name)
                continue

            prev = None
            h = parent.first_child
            while h is not None:
                node = self.nodes[h] if 0 <= h < len(self.nodes) else None
                if( node is None ):
                    problems.append("dangling handle %d under %r" % (h, parent.name))
                    break
                if( h in seen ):
                    problems.append("%r reached twice" % node.name)
                    break
                seen.add(h)

                if( node.kind is Kind.ROOT ):
                    problems.append("second root %r under %r" % (node.name, parent.name))
                if( node.parent != parent.handle ):
                    problems.append("%r points at the wrong parent" % node.name)
                if( node.prev != (prev.handle if prev is not None else None) ):
                    problems.append("%r has a stale prev link" % node.name)
                if( prev is not None and not prev.name < node.name ):
                    problems.append("%r listed after %r" % (node.name, prev.name))
                if( is_reserved(node.name) or is_invalid(node.name) ):
                    problems.append("illegal name %r" % node.name)

                stack.append(node)
                prev = node
                h = node.next

        if( len(seen) != self.live ):
            problems.append("%d live nodes but %d reachable" % (self.live, len(seen)))
        return problems
