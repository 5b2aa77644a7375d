# _predictor.py
import numpy as np

from ._errors import IncompatibleModelError
from ._input import as_row, iter_rows
from ._loader import Model, load_model
from ._objective import transform
from ._tree import DTYPE


class XGBoostPredictor:
    """Thread-safe predictor for an XGBoost JSON model.

    The model is loaded once, at construction, and only read afterwards:
    any number of threads may call the predict methods of one instance
    concurrently.

    Parameters
    ----------
    source : str, os.PathLike or file object
        Location of the JSON model written by ``Booster.save_model``.
    """

    def __init__(self, source):
        self._model = load_model(source)

    @classmethod
    def from_model(cls, model):
        """Wrap an already loaded :class:`Model`."""
        if not isinstance(model, Model):
            raise TypeError("model should be a Model, got %s"
                            % type(model).__name__)
        predictor = cls.__new__(cls)
        predictor._model = model
        return predictor

    def __repr__(self):
        return (f"XGBoostPredictor(objective={self.objective!r}, "
                f"num_class={self.num_class}, num_trees={self.num_trees})")

    @property
    def model(self):
        return self._model

    @property
    def num_class(self):
        return self._model.num_class

    @property
    def num_trees(self):
        return self._model.num_trees

    @property
    def objective(self):
        return self._model.objective

    @property
    def transformation(self):
        return self._model.transformation

    @property
    def base_score(self):
        return self._model.base_score

    def _predict_trees(self, row, trees):
        """Sum of the tree outputs for `row` plus the base score."""
        prediction = DTYPE(0.0)
        for tree in trees:
            prediction += DTYPE(tree.predict_row(row))
        return prediction + self._model.base_score

    def predict(self, data, output_margin=False):
        """Predict one score per class for a single feature vector.

        Parameters
        ----------
        data : sequence, 1-d array, mapping or one-row sparse matrix
            Feature values indexed by feature number. ``None``, NaN, unstored
            sparse entries and indices past the end are missing.
        output_margin : bool, default=False
            Return raw margins instead of transformed predictions.

        Returns
        -------
        scores : ndarray of shape (num_class,), dtype float32
        """
        row = as_row(data)
        scores = np.array(
            [self._predict_trees(row, trees)
             for trees in self._model.predictors],
            dtype=DTYPE)

        if not output_margin:
            scores = transform(scores, self._model.transformation)

        return scores

    def predict_batch(self, X, output_margin=False):
        """Predict one score per row with a single class model.

        The transformation is applied once over the whole result vector.

        Parameters
        ----------
        X : 2-d array, sparse matrix or iterable of feature vectors
        output_margin : bool, default=False

        Returns
        -------
        scores : ndarray of shape (n_samples,), dtype float32
        """
        if self._model.num_class != 1:
            raise IncompatibleModelError(
                "xgboost predict incompatible model size: %d"
                % self._model.num_class)

        trees = self._model.predictors[0]
        scores = np.array(
            [self._predict_trees(row, trees) for row in iter_rows(X)],
            dtype=DTYPE)

        if not output_margin:
            scores = transform(scores, self._model.transformation)

        return scores

    def predict_leaf(self, data):
        """Return, per class, the leaf index reached in each tree."""
        row = as_row(data)
        return [np.array([tree.apply_row(row) for tree in trees], dtype=np.intp)
                for trees in self._model.predictors]
