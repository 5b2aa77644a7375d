# _tree.py
import enum

import numpy as np

from ._errors import CycleOrSharedNodeError, SizeMismatchError, StructuralError

TREE_LEAF = -1

DTYPE = np.float32


class Visit(enum.Enum):
    """Outcome of following one edge during tree validation."""

    UNVISITED = 0
    VISITED_VIA_ALIAS = 1
    VISITED_VIA_NEW_EDGE = 2


class Node:
    """Node structure for tree.

    `value` is the split threshold of a decision node or the output of a
    leaf. `feature` is ``TREE_LEAF`` for leaves.
    """

    __slots__ = ('value', 'feature', 'yes', 'no', 'missing')

    def __init__(self, value=0.0, feature=TREE_LEAF, yes=0, no=0, missing=0):
        object.__setattr__(self, 'value', value)
        object.__setattr__(self, 'feature', feature)
        object.__setattr__(self, 'yes', yes)
        object.__setattr__(self, 'no', no)
        object.__setattr__(self, 'missing', missing)

    def __setattr__(self, name, value):
        raise AttributeError(f"Node is read-only, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Node is read-only, cannot delete {name!r}")

    def __reduce__(self):
        """Reduce re-implementation, for pickling."""
        return (Node, (self.value, self.feature, self.yes, self.no,
                       self.missing))

    @property
    def is_leaf(self):
        return self.feature < 0

    def __repr__(self):
        if self.is_leaf:
            return f"Node(leaf={self.value:.6g})"
        return (f"Node(feature={self.feature}, threshold={self.value:.6g}, "
                f"yes={self.yes}, no={self.no}, missing={self.missing})")


def _readonly(array):
    array.flags.writeable = False
    return array


class Tree:
    """Array-of-nodes representation of one boosted tree.

    Node 0 is the root. Instances are built by :func:`build_tree`, which
    validates them, and are never modified afterwards.
    """

    __slots__ = ('_nodes',)

    def __init__(self, nodes):
        self._nodes = tuple(nodes)

    def __reduce__(self):
        """Reduce re-implementation, for pickling."""
        return (Tree, (self._nodes,))

    @property
    def nodes(self):
        """Tuple of the tree's nodes, root first."""
        return self._nodes

    @property
    def node_count(self):
        return len(self._nodes)

    def __len__(self):
        return self.node_count

    def __repr__(self):
        return f"Tree(node_count={self.node_count}, n_leaves={self.n_leaves})"

    @property
    def children_left(self):
        """Array of `yes` children, ``TREE_LEAF`` for leaves."""
        return _readonly(np.array(
            [TREE_LEAF if node.is_leaf else node.yes for node in self.nodes],
            dtype=np.intp))

    @property
    def children_right(self):
        """Array of `no` children, ``TREE_LEAF`` for leaves."""
        return _readonly(np.array(
            [TREE_LEAF if node.is_leaf else node.no for node in self.nodes],
            dtype=np.intp))

    @property
    def children_missing(self):
        """Array of `missing` children, ``TREE_LEAF`` for leaves."""
        return _readonly(np.array(
            [TREE_LEAF if node.is_leaf else node.missing for node in self.nodes],
            dtype=np.intp))

    @property
    def feature(self):
        """Array of split features for each node."""
        return _readonly(np.array([node.feature for node in self.nodes],
                                  dtype=np.intp))

    @property
    def threshold(self):
        """Array of thresholds (decision nodes) and leaf values (leaves)."""
        return _readonly(np.array([node.value for node in self.nodes],
                                  dtype=DTYPE))

    @property
    def n_leaves(self):
        """Number of leaves in the tree."""
        return sum(1 for node in self.nodes if node.is_leaf)

    def compute_node_depths(self):
        """Compute the depth of each node reachable from the root.

        The root has depth 1.
        """
        depths = np.zeros(self.node_count, dtype=np.int64)
        if self.node_count == 0:
            return depths

        depths[0] = 1  # init root node
        stack = [0]
        while stack:
            node_id = stack.pop()
            node = self.nodes[node_id]
            if node.is_leaf:
                continue
            depth = depths[node_id] + 1
            for child in {node.yes, node.no, node.missing}:
                depths[child] = depth
                stack.append(child)

        return depths

    @property
    def max_depth(self):
        """Number of edges on the longest root-to-leaf path."""
        if self.node_count == 0:
            return 0
        return int(self.compute_node_depths().max()) - 1

    def apply_row(self, row):
        """Find the terminal region (=leaf node) reached by `row`.

        `row` is an indexable sequence of floats where NaN marks a missing
        feature. Features beyond the end of `row` are missing as well.
        """
        n_features = len(row)
        nodes = self.nodes
        node_idx = 0

        while True:
            node = nodes[node_idx]

            if node.feature < 0:
                return node_idx

            if node.feature < n_features:
                value = row[node.feature]
                # NaN compares unequal to itself
                if value == value:
                    node_idx = node.yes if value < node.value else node.no
                    continue

            node_idx = node.missing

    def predict_row(self, row):
        """Return the leaf value reached by `row`."""
        return self.nodes[self.apply_row(row)].value


def build_tree(default_left, left_children, right_children, split_indices,
               split_conditions):
    """Build and validate a tree from its parallel arrays.

    A node is a leaf iff its left child is negative. For a decision node the
    missing branch follows the left child when `default_left` is set and the
    right child otherwise.
    """
    sizes = (len(default_left), len(left_children), len(right_children),
             len(split_indices), len(split_conditions))
    if len(set(sizes)) != 1:
        raise SizeMismatchError(
            "json array sizes do not match: default_left=%d, "
            "left_children=%d, right_children=%d, split_indices=%d, "
            "split_conditions=%d" % sizes)

    nodes = []
    for i in range(sizes[0]):
        value = float(DTYPE(split_conditions[i]))
        left = int(left_children[i])

        if left < 0:
            nodes.append(Node(value=value))
            continue

        feature = int(split_indices[i])
        if feature < 0:
            raise StructuralError(
                "negative split index %d at node %d" % (feature, i))

        right = int(right_children[i])
        nodes.append(Node(
            value=value,
            feature=feature,
            yes=left,
            no=right,
            missing=left if default_left[i] else right,
        ))

    tree = Tree(nodes)
    check_tree(tree)
    return tree


def _classify_edge(child, taken, visited):
    """Classify the edge from the current parent to `child`.

    `taken` holds the children already followed from the same parent, so a
    `missing` branch that repeats `yes` or `no` is an alias, not a new edge.
    """
    if child in taken:
        return Visit.VISITED_VIA_ALIAS
    if visited[child]:
        return Visit.VISITED_VIA_NEW_EDGE
    return Visit.UNVISITED


def check_tree(tree):
    """Check that `tree` is a non-empty, proper rooted tree.

    Raises StructuralError for an empty tree or a child index out of range,
    and CycleOrSharedNodeError when a node can be reached through two
    distinct edges.
    """
    nodes = tree.nodes
    node_count = len(nodes)

    if node_count == 0:
        raise StructuralError("empty tree")

    for index, node in enumerate(nodes):
        if node.is_leaf:
            continue
        for branch in ('yes', 'no', 'missing'):
            child = getattr(node, branch)
            if not 0 <= child < node_count:
                raise StructuralError(
                    "tree %s index %d out of range at node %d (node count %d)"
                    % (branch, child, index, node_count))

    # Depth-first walk without recursion, every node marked once
    visited = np.zeros(node_count, dtype=np.bool_)
    visited[0] = True
    stack = [0]

    while stack:
        index = stack.pop()
        node = nodes[index]
        if node.is_leaf:
            continue

        taken = []
        for child in (node.yes, node.no, node.missing):
            visit = _classify_edge(child, taken, visited)
            if visit is Visit.VISITED_VIA_ALIAS:
                continue
            if visit is Visit.VISITED_VIA_NEW_EDGE:
                raise CycleOrSharedNodeError(
                    "node %d reached again from node %d (cycle or shared node)"
                    % (child, index))
            visited[child] = True
            taken.append(child)
            stack.append(child)
