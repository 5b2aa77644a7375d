# _input.py
"""Conversion of caller feature vectors into traversal rows.

A row is a plain list of floats indexed by feature number, with NaN marking
a missing feature. Values are rounded to single precision, which is the
precision split thresholds are stored with.
"""

from collections.abc import Mapping

import numpy as np
from scipy.sparse import csr_matrix, issparse

DTYPE = np.float32

MISSING = float('nan')


def _to_float(value):
    if value is None:
        return MISSING
    return float(DTYPE(value))


def _row_from_mapping(data):
    if not data:
        return []
    keys = [int(key) for key in data]
    if min(keys) < 0:
        raise ValueError("feature indices should be non-negative, got %d"
                         % min(keys))
    row = [MISSING] * (max(keys) + 1)
    for key, value in data.items():
        row[int(key)] = _to_float(value)
    return row


def _rows_from_csr(X):
    X = csr_matrix(X)
    X_data = X.data
    X_indices = X.indices
    X_indptr = X.indptr
    n_samples, n_features = X.shape

    for i in range(n_samples):
        row = [MISSING] * n_features
        for k in range(X_indptr[i], X_indptr[i + 1]):
            row[X_indices[k]] = float(DTYPE(X_data[k]))
        yield row


def as_row(data):
    """Convert one feature vector into a row.

    Accepted: a sequence with ``None`` or NaN for missing slots, a 1-d
    numpy array, a mapping of feature index to value, or a sparse matrix
    holding a single row (entries that are not stored are missing).
    """
    if issparse(data):
        if data.ndim != 2 or data.shape[0] != 1:
            raise ValueError(
                "sparse feature vector should have exactly one row, got shape %s"
                % (data.shape,))
        return next(_rows_from_csr(data))

    if isinstance(data, Mapping):
        return _row_from_mapping(data)

    if isinstance(data, np.ndarray):
        if data.ndim != 1:
            raise ValueError(
                "feature vector should be a 1-d array, got %d dimensions"
                % data.ndim)
        return data.astype(DTYPE).tolist()

    return [_to_float(value) for value in data]


def iter_rows(X):
    """Yield one row per sample of a batch.

    `X` is a 2-d numpy array (NaN for missing values), a 2-d sparse matrix,
    or an iterable of feature vectors accepted by :func:`as_row`.
    """
    if issparse(X):
        if X.ndim != 2:
            raise ValueError(
                "X should be a 2-d sparse matrix, got %d dimensions" % X.ndim)
        yield from _rows_from_csr(X)
        return

    if isinstance(X, np.ndarray):
        if X.ndim != 2:
            raise ValueError(
                "X should be a 2-d array, got %d dimensions" % X.ndim)
        for row in X.astype(DTYPE):
            yield row.tolist()
        return

    for data in X:
        yield as_row(data)
