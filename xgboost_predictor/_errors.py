# _errors.py
"""Exceptions raised while loading a model or making predictions."""


class XGBoostPredictorError(Exception):
    """Base class for every error raised by this package."""


class ModelLoadError(XGBoostPredictorError, ValueError):
    """The model description could not be turned into a usable model."""


class ParseError(ModelLoadError):
    """The document is not well-formed JSON or its root is not an object."""


class SchemaError(ModelLoadError):
    """A required member is missing or has the wrong type."""


class SizeMismatchError(ModelLoadError):
    """The parallel arrays describing a tree differ in length."""


class StructuralError(ModelLoadError):
    """A tree is empty, points outside itself, or is not a proper tree."""


class CycleOrSharedNodeError(StructuralError):
    """A node is reachable through more than one distinct edge."""


class GroupIndexError(ModelLoadError):
    """`tree_info` does not match the trees or holds a negative group."""


class InvalidBaseScoreError(ModelLoadError):
    """The base score is outside (0, 1) for a logistic objective."""


class ModelIOError(ModelLoadError, OSError):
    """The model source cannot be opened or read."""


class IncompatibleModelError(XGBoostPredictorError, ValueError):
    """Batch prediction was requested on a model with several classes."""
