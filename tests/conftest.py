import json

import pytest


def _tree(left_children, right_children, split_indices, split_conditions,
          default_left):
    return {
        "default_left": list(default_left),
        "left_children": list(left_children),
        "right_children": list(right_children),
        "split_indices": list(split_indices),
        "split_conditions": list(split_conditions),
    }


@pytest.fixture
def leaf_tree():
    """Factory for a tree made of a single leaf."""
    def _make(value=0.0):
        return _tree([-1], [-1], [0], [value], [False])
    return _make


@pytest.fixture
def stump():
    """f0 < 1.0 -> -0.5, else 0.5; missing goes left."""
    return _tree(
        left_children=[1, -1, -1],
        right_children=[2, -1, -1],
        split_indices=[0, 0, 0],
        split_conditions=[1.0, -0.5, 0.5],
        default_left=[True, False, False],
    )


@pytest.fixture
def two_level_tree():
    """f1 < 2.5 -> 0.125, else (f2 < 0 -> 0.25, else 0.75).

    Missing goes right at the root and left at node 2.
    """
    return _tree(
        left_children=[1, -1, 3, -1, -1],
        right_children=[2, -1, 4, -1, -1],
        split_indices=[1, 0, 2, 0, 0],
        split_conditions=[2.5, 0.125, 0, 0.25, 0.75],
        default_left=[False, False, True, False, False],
    )


@pytest.fixture
def model_document():
    """Factory for a complete JSON model document."""
    def _make(trees, tree_info=None, objective="reg:squarederror",
              base_score="5E-1"):
        if tree_info is None:
            tree_info = [0] * len(trees)
        return {
            "learner": {
                "gradient_booster": {
                    "model": {
                        "trees": list(trees),
                        "tree_info": list(tree_info),
                    },
                },
                "objective": {"name": objective},
                "learner_model_param": {"base_score": base_score},
            },
        }
    return _make


@pytest.fixture
def model_file(tmp_path, model_document):
    """Factory writing a model document to disk and returning its path."""
    def _make(*args, **kwargs):
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model_document(*args, **kwargs)))
        return path
    return _make
