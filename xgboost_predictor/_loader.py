# _loader.py
"""Read an XGBoost JSON model into an immutable :class:`Model`.

Loading is all-or-nothing: the first violated precondition raises a
:class:`ModelLoadError` subclass and no model is returned.
"""

import json
import os
from dataclasses import dataclass

import numpy as np

from ._errors import (
    GroupIndexError, ModelIOError, ParseError, SchemaError
)
from ._objective import ObjectiveFamily, Transformation
from ._schema import (
    get_array, get_bool_array, get_float_array, get_int_array, get_object,
    get_string
)
from ._tree import DTYPE, build_tree
from .logger import init_logger

logger = init_logger(__name__)


@dataclass(frozen=True)
class Model:
    """A loaded tree ensemble.

    `predictors` holds one tuple of trees per output group (class).
    `base_score` is already mapped into margin space.
    """

    predictors: tuple
    base_score: np.float32
    transformation: Transformation
    objective: str
    objective_family: ObjectiveFamily

    @property
    def num_class(self):
        return len(self.predictors)

    @property
    def num_trees(self):
        return sum(len(predictor) for predictor in self.predictors)


def tree_from_json(json_tree):
    """Build one tree from its JSON object."""
    return build_tree(
        get_bool_array(json_tree, "default_left"),
        get_int_array(json_tree, "left_children"),
        get_int_array(json_tree, "right_children"),
        get_int_array(json_tree, "split_indices"),
        get_float_array(json_tree, "split_conditions"),
    )


def group_trees(trees, tree_info):
    """Partition `trees` into predictors according to `tree_info`.

    Trees keep their source order inside each group. The number of groups is
    one more than the largest group index seen. A group index must be
    smaller than the number of trees, since every group holds a tree.
    """
    if len(tree_info) != len(trees):
        raise GroupIndexError(
            "unexpected tree_info size: %d, trees: %d"
            % (len(tree_info), len(trees)))

    groups = []
    for tree, group in zip(trees, tree_info):
        group = int(group)
        if not 0 <= group < len(trees):
            raise GroupIndexError(
                "unexpected tree_info group: %d, trees: %d"
                % (group, len(trees)))
        while len(groups) < group + 1:
            groups.append([])
        groups[group].append(tree)

    return tuple(tuple(group) for group in groups)


def parse_base_score(text):
    """Parse the stored base score string into a float32.

    Newer XGBoost releases store the score as a one element vector such as
    ``"[5E-1]"``.
    """
    stripped = text.strip()
    if stripped.startswith("[") and stripped.endswith("]"):
        items = [item for item in stripped[1:-1].split(",") if item.strip()]
        if len(items) != 1:
            raise SchemaError(
                "base_score should hold a single value, got: %r" % text)
        stripped = items[0].strip()

    try:
        return DTYPE(float(stripped))
    except ValueError as err:
        raise SchemaError("invalid base_score: %r" % text) from err


def parse_model(document):
    """Build a Model from an already decoded JSON document."""
    if not isinstance(document, dict):
        raise ParseError("invalid xgboost json model: root is not an object")

    learner = get_object(document, "learner")
    gradient_booster = get_object(learner, "gradient_booster")
    model = get_object(gradient_booster, "model")

    trees = []
    for index, json_tree in enumerate(get_array(model, "trees")):
        tree = tree_from_json(json_tree)
        logger.debug("tree %d: %d nodes, %d leaves",
                     index, tree.node_count, tree.n_leaves)
        trees.append(tree)

    predictors = group_trees(trees, get_int_array(model, "tree_info"))

    objective = get_string(get_object(learner, "objective"), "name")
    raw_base_score = parse_base_score(
        get_string(get_object(learner, "learner_model_param"), "base_score"))

    family = ObjectiveFamily.from_objective(objective)
    result = Model(
        predictors=predictors,
        base_score=family.transform_base_score(raw_base_score),
        transformation=family.transformation,
        objective=objective,
        objective_family=family,
    )

    logger.info("loaded xgboost model: objective=%s, trees=%d, classes=%d, "
                "base_score=%g (raw %g), transformation=%s",
                objective, result.num_trees, result.num_class,
                result.base_score, raw_base_score,
                result.transformation.value)
    return result


def _reject_constant(name):
    raise ParseError("invalid xgboost json model: non-finite literal %s" % name)


def loads_model(text):
    """Build a Model from JSON text (str or bytes).

    The non-standard literals NaN, Infinity and -Infinity are rejected.
    """
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except ParseError:
        raise
    except ValueError as err:
        raise ParseError("invalid xgboost json model: %s" % err) from err
    return parse_model(document)


def load_model(source):
    """Build a Model from a file path or a readable file object."""
    if isinstance(source, (str, bytes, os.PathLike)):
        try:
            with open(source, "rb") as f:
                text = f.read()
        except OSError as err:
            raise ModelIOError(
                "cannot read xgboost json model %r: %s"
                % (os.fsdecode(source), err)) from err
        logger.debug("read %d bytes from %s", len(text), os.fsdecode(source))
    else:
        try:
            text = source.read()
        except OSError as err:
            raise ModelIOError(
                "cannot read xgboost json model: %s" % err) from err

    return loads_model(text)
