"""
XGBoost predictor - thread-safe inference for XGBoost JSON tree ensembles
"""

from ._errors import (
    XGBoostPredictorError, ModelLoadError, ParseError, SchemaError,
    SizeMismatchError, StructuralError, CycleOrSharedNodeError,
    GroupIndexError, InvalidBaseScoreError, ModelIOError,
    IncompatibleModelError
)
from ._loader import Model, load_model, loads_model, parse_model
from ._objective import ObjectiveFamily, Transformation, transform
from ._predictor import XGBoostPredictor
from ._tree import Node, Tree, build_tree, check_tree

__version__ = "0.1.0"

__all__ = [
    'XGBoostPredictor',
    'Model',
    'load_model',
    'loads_model',
    'parse_model',
    'transform',
    'Transformation',
    'ObjectiveFamily',
    'Node',
    'Tree',
    'build_tree',
    'check_tree',
    'XGBoostPredictorError',
    'ModelLoadError',
    'ParseError',
    'SchemaError',
    'SizeMismatchError',
    'StructuralError',
    'CycleOrSharedNodeError',
    'GroupIndexError',
    'InvalidBaseScoreError',
    'ModelIOError',
    'IncompatibleModelError',
]
