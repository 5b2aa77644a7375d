import io
import json
import logging
import math

import numpy as np
import pytest

from xgboost_predictor import (
    GroupIndexError, InvalidBaseScoreError, ModelIOError, ModelLoadError,
    ObjectiveFamily, ParseError, SchemaError, SizeMismatchError,
    StructuralError, Transformation, load_model, loads_model, parse_model
)
from xgboost_predictor._loader import group_trees, parse_base_score


def test_parse_model(model_document, stump, two_level_tree):
    model = parse_model(model_document([stump, two_level_tree]))
    assert model.num_class == 1
    assert model.num_trees == 2
    assert model.objective == "reg:squarederror"
    assert model.objective_family is ObjectiveFamily.RAW
    assert model.transformation is Transformation.NONE
    assert model.base_score == 0.5
    assert [tree.node_count for tree in model.predictors[0]] == [3, 5]


def test_model_is_frozen(model_document, stump):
    model = parse_model(model_document([stump]))
    with pytest.raises(AttributeError):
        model.base_score = 1.0
    assert isinstance(model.predictors, tuple)
    assert isinstance(model.predictors[0], tuple)


def test_multiclass_grouping(model_document, leaf_tree):
    trees = [leaf_tree(float(i)) for i in range(6)]
    model = parse_model(model_document(
        trees, tree_info=[0, 1, 2, 0, 1, 2], objective="multi:softprob"))
    assert model.num_class == 3
    assert model.transformation is Transformation.SOFTMAX
    values = [[tree.nodes[0].value for tree in predictor]
              for predictor in model.predictors]
    assert values == [[0.0, 3.0], [1.0, 4.0], [2.0, 5.0]]


def test_grouping_grows_to_largest_group():
    groups = group_trees(["a", "b", "c"], [2, 0, 2])
    assert groups == (("b",), (), ("a", "c"))


def test_tree_info_size_mismatch(model_document, stump):
    with pytest.raises(GroupIndexError, match="tree_info size"):
        parse_model(model_document([stump, stump], tree_info=[0]))


def test_negative_group(model_document, stump):
    with pytest.raises(GroupIndexError, match="group"):
        parse_model(model_document([stump], tree_info=[-1]))


@pytest.mark.parametrize("tree_info", [[1], [10 ** 9], [2 ** 31 - 1]])
def test_group_beyond_tree_count(model_document, stump, tree_info):
    with pytest.raises(GroupIndexError, match="tree_info group: %d, trees: 1" % tree_info[0]):
        parse_model(model_document([stump], tree_info=tree_info))


def test_group_bound_checked_before_growing():
    with pytest.raises(GroupIndexError):
        group_trees(["a", "b"], [0, 10 ** 9])
    assert group_trees(["a", "b"], [1, 1]) == ((), ("a", "b"))


def test_no_trees(model_document):
    model = parse_model(model_document([]))
    assert model.num_class == 0
    assert model.num_trees == 0


@pytest.mark.parametrize("objective, base_score, expected", [
    ("binary:logistic", "0.5", 0.0),
    ("binary:logistic", "5E-1", 0.0),
    ("binary:logitraw", "0.5", 0.0),
    ("reg:logistic", "0.25", -math.log(3.0)),
    ("reg:gamma", repr(math.e), 1.0),
    ("count:poisson", "1", 0.0),
    ("reg:squarederror", "0.5", 0.5),
    ("multi:softprob", "0.5", 0.5),
])
def test_base_score_reparametrization(model_document, stump, objective,
                                      base_score, expected):
    model = parse_model(model_document([stump], objective=objective,
                                       base_score=base_score))
    assert model.base_score == pytest.approx(expected, rel=1e-6, abs=1e-7)
    assert isinstance(model.base_score, np.float32)


def test_logitraw_keeps_raw_margin(model_document, stump):
    model = parse_model(model_document([stump], objective="binary:logitraw"))
    assert model.transformation is Transformation.NONE
    assert model.objective_family is ObjectiveFamily.LOGIT_RAW


@pytest.mark.parametrize("base_score", ["0", "1", "1.5", "-0.1"])
def test_invalid_logistic_base_score(model_document, stump, base_score):
    with pytest.raises(InvalidBaseScoreError, match="base_score"):
        parse_model(model_document([stump], objective="binary:logistic",
                                   base_score=base_score))


@pytest.mark.parametrize("text, expected", [
    ("0.5", 0.5),
    ("5E-1", 0.5),
    ("[5E-1]", 0.5),
    (" [2.5E-1] ", 0.25),
    ("3", 3.0),
])
def test_parse_base_score(text, expected):
    assert parse_base_score(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "[]", "[1,2]"])
def test_parse_base_score_rejects_garbage(text):
    with pytest.raises(SchemaError, match="base_score"):
        parse_base_score(text)


def test_base_score_must_be_a_string(model_document, stump):
    with pytest.raises(SchemaError, match="base_score"):
        parse_model(model_document([stump], base_score=0.5))


@pytest.mark.parametrize("path", [
    ("learner",),
    ("learner", "gradient_booster"),
    ("learner", "gradient_booster", "model"),
    ("learner", "gradient_booster", "model", "trees"),
    ("learner", "gradient_booster", "model", "tree_info"),
    ("learner", "objective"),
    ("learner", "objective", "name"),
    ("learner", "learner_model_param"),
])
def test_missing_member(model_document, stump, path):
    document = model_document([stump])
    parent = document
    for key in path[:-1]:
        parent = parent[key]
    del parent[path[-1]]

    with pytest.raises(SchemaError, match=path[-1]):
        parse_model(document)


def test_tree_member_with_wrong_type(model_document, stump):
    stump["default_left"] = [1, 0, 0]
    with pytest.raises(SchemaError, match="default_left"):
        parse_model(model_document([stump]))


def test_tree_arrays_size_mismatch(model_document, stump):
    stump["split_conditions"] = [1.0, -0.5]
    with pytest.raises(SizeMismatchError):
        parse_model(model_document([stump]))


def test_structural_error_propagates(model_document, stump):
    stump["right_children"] = [3, -1, -1]
    with pytest.raises(StructuralError):
        parse_model(model_document([stump]))


def test_loads_model(model_document, stump):
    text = json.dumps(model_document([stump]))
    assert loads_model(text).num_trees == 1
    assert loads_model(text.encode("utf-8")).num_trees == 1


@pytest.mark.parametrize("text", [
    "", "{", "not json", "[1, 2]", "3", "null", "NaN", '{"learner": Infinity}',
])
def test_parse_error(text):
    with pytest.raises(ParseError):
        loads_model(text)


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_literal_rejected(model_document, stump, literal):
    text = json.dumps(model_document([stump]))
    text = text.replace('"split_conditions": [1.0', '"split_conditions": [%s' % literal)
    assert literal in text
    with pytest.raises(ParseError, match="non-finite literal %s" % literal):
        loads_model(text)


@pytest.mark.parametrize("member, value", [
    ("left_children", 10 ** 25),
    ("split_indices", -2 ** 40),
    ("split_conditions", 10 ** 400),
])
def test_out_of_range_tree_member(model_document, stump, member, value):
    stump[member][0] = value
    text = json.dumps(model_document([stump]))
    with pytest.raises(SchemaError, match="%s json array member is out of range" % member):
        loads_model(text)


def test_load_model_from_path(model_file, stump):
    path = model_file([stump], objective="binary:logistic")
    assert load_model(path).transformation is Transformation.SIGMOID
    assert load_model(str(path)).num_trees == 1


def test_load_model_from_file_object(model_document, stump):
    text = json.dumps(model_document([stump]))
    assert load_model(io.StringIO(text)).num_trees == 1
    assert load_model(io.BytesIO(text.encode("utf-8"))).num_trees == 1


def test_load_model_missing_file(tmp_path):
    with pytest.raises(ModelIOError, match="foo.bar") as excinfo:
        load_model(tmp_path / "foo.bar")
    assert isinstance(excinfo.value, OSError)
    assert isinstance(excinfo.value, ModelLoadError)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_load_model_directory(tmp_path):
    with pytest.raises(ModelIOError):
        load_model(tmp_path)


def test_load_errors_are_value_errors(model_document):
    with pytest.raises(ValueError):
        parse_model({"learner": []})


def test_load_logs_summary(model_document, stump, caplog):
    with caplog.at_level(logging.INFO, logger="xgboost_predictor"):
        parse_model(model_document([stump], objective="binary:logistic"))
    assert "objective=binary:logistic" in caplog.text
    assert "trees=1" in caplog.text
