# _objective.py
"""Objective-dependent behaviour: base score link and output transformation.

An objective name is resolved once, at load time, into an
:class:`ObjectiveFamily`. The family decides both how the stored base score
is mapped into margin space and which transformation turns margins into
predictions.
"""

import enum
import math

import numpy as np
from scipy.special import expit

from ._errors import InvalidBaseScoreError

DTYPE = np.float32


class Transformation(enum.Enum):
    """Output margin transformation."""

    NONE = 'none'
    SIGMOID = 'sigmoid'
    SOFTMAX = 'softmax'


class ObjectiveFamily(enum.Enum):
    LOGISTIC = 'logistic'
    # logistic base score, raw margin output
    LOGIT_RAW = 'logitraw'
    LOG_LINK = 'log_link'
    SOFTMAX = 'softmax'
    RAW = 'raw'

    @classmethod
    def from_objective(cls, name):
        """Resolve an objective name such as ``binary:logistic``."""
        return _FAMILIES.get(name, cls.RAW)

    @property
    def transformation(self):
        if self is ObjectiveFamily.SOFTMAX:
            return Transformation.SOFTMAX
        if self is ObjectiveFamily.LOGISTIC:
            return Transformation.SIGMOID
        return Transformation.NONE

    def transform_base_score(self, base_score):
        """Map a raw base score into margin space.

        Logistic families take the logit of the score, which must lie
        strictly inside (0, 1); log-link families take its natural log.
        """
        base_score = DTYPE(base_score)

        if self in (ObjectiveFamily.LOGISTIC, ObjectiveFamily.LOGIT_RAW):
            if not 0.0 < base_score < 1.0:
                raise InvalidBaseScoreError(
                    "base_score must be in (0,1) for logistic loss, got: %r"
                    % float(base_score))
            return DTYPE(-np.log(DTYPE(1.0) / base_score - DTYPE(1.0)))

        if self is ObjectiveFamily.LOG_LINK:
            with np.errstate(divide='ignore', invalid='ignore'):
                return DTYPE(np.log(base_score))

        return base_score


_FAMILIES = {
    'reg:logistic': ObjectiveFamily.LOGISTIC,
    'binary:logistic': ObjectiveFamily.LOGISTIC,
    'binary:logitraw': ObjectiveFamily.LOGIT_RAW,
    'reg:gamma': ObjectiveFamily.LOG_LINK,
    'reg:tweedie': ObjectiveFamily.LOG_LINK,
    'count:poisson': ObjectiveFamily.LOG_LINK,
    'survival:aft': ObjectiveFamily.LOG_LINK,
    'survival:cox': ObjectiveFamily.LOG_LINK,
    'multi:softprob': ObjectiveFamily.SOFTMAX,
}


def transform_sigmoid(scores):
    """Elementwise logistic function."""
    return expit(scores).astype(DTYPE, copy=False)


def transform_softmax(scores):
    """Numerically stable softmax over the whole score vector.

    The maximum is subtracted before exponentiating and the normalizing sum
    is accumulated in double precision.
    """
    shifted = np.exp(scores - scores.max())
    total = math.fsum(shifted.astype(np.float64))
    return (shifted / total).astype(DTYPE)


def transform(scores, transformation):
    """Apply `transformation` to a score vector and return a new array.

    `scores` is left untouched. An empty vector is returned unchanged for
    every transformation.
    """
    scores = np.array(scores, dtype=DTYPE)
    if scores.ndim != 1:
        raise ValueError(
            "scores should be a 1-d sequence, got %d dimensions" % scores.ndim)

    transformation = Transformation(transformation)
    if scores.size == 0:
        return scores

    if transformation is Transformation.SIGMOID:
        return transform_sigmoid(scores)
    if transformation is Transformation.SOFTMAX:
        return transform_softmax(scores)
    return scores
