# xgboost_predictor/debug_utils.py
import numpy as np

from .logger import init_logger

logger = init_logger(__name__)


def compare_predictions(expected_pred, python_pred, tolerance=1e-6):
    """Compare two prediction vectors and log summary statistics.

    Returns the difference ``expected_pred - python_pred``.
    """
    expected_pred = np.asarray(expected_pred, dtype=np.float64)
    python_pred = np.asarray(python_pred, dtype=np.float64)
    if expected_pred.shape != python_pred.shape:
        raise ValueError("prediction shapes differ: %s vs %s"
                         % (expected_pred.shape, python_pred.shape))

    diff = expected_pred - python_pred
    if diff.size == 0:
        return diff

    abs_diff = np.abs(diff)
    logger.info("mean absolute difference: %.6g", np.mean(abs_diff))
    logger.info("max absolute difference: %.6g", np.max(abs_diff))

    if np.allclose(expected_pred, python_pred, atol=tolerance):
        logger.info("predictions match within %g", tolerance)
    else:
        logger.warning("predictions do NOT match within %g: %d of %d differ",
                       tolerance, int(np.sum(abs_diff > tolerance)), diff.size)

    return diff


def format_tree(tree):
    """Render a tree in the xgboost text dump layout.

    Decision nodes read ``0:[f2<1.5] yes=1,no=2,missing=1``, leaves read
    ``3:leaf=0.4``; children are indented by one tab per level.
    """
    lines = []
    stack = [(0, 0)]

    while stack:
        node_id, depth = stack.pop()
        node = tree.nodes[node_id]
        indent = "\t" * depth

        if node.is_leaf:
            lines.append(f"{indent}{node_id}:leaf={node.value:.9g}")
            continue

        lines.append(
            f"{indent}{node_id}:[f{node.feature}<{node.value:.9g}] "
            f"yes={node.yes},no={node.no},missing={node.missing}")
        # no is pushed first so that yes is printed first
        if node.no != node.yes:
            stack.append((node.no, depth + 1))
        stack.append((node.yes, depth + 1))

    return "\n".join(lines)


def debug_tree_structure(tree):
    """Log the structure of a tree at DEBUG level."""
    logger.debug("tree with %d nodes, %d leaves, max depth %d\n%s",
                 tree.node_count, tree.n_leaves, tree.max_depth,
                 format_tree(tree))
