"""
transformers.py (PURE)
- Weighting schemes over a term-document matrix (rows = terms, cols = documents).
- Transformer: fit / transform / fit_transform capability interface.
- TfidfTransformer: idf[i] = ln((1 + n) / (1 + df[i])), applied row-wise.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
import numpy as np
from src.weighting.matrix import DenseMatrix, as_array, dims_of


class ShapeMismatch(ValueError):
    """transform() called unfitted, or with a row count != fitted vocabulary size."""

    def __init__(self, expected: Optional[int], actual: int):
        self.expected = expected
        self.actual = actual
        if expected is None:
            msg = "transformer is not fitted; call fit() first"
        else:
            msg = f"matrix has {actual} rows (terms), transformer was fitted on {expected}"
        super().__init__(msg)


class Transformer(ABC):

    @abstractmethod
    def fit(self, matrix) -> "Transformer":
        ...

    @abstractmethod
    def transform(self, matrix) -> DenseMatrix:
        ...

    def fit_transform(self, matrix) -> DenseMatrix:
        return self.fit(matrix).transform(matrix)


class CountTransformer(Transformer):
    """Raw term frequency: transform() returns an unweighted copy."""

    def __init__(self):
        self.n_terms: Optional[int] = None

    def fit(self, matrix) -> "CountTransformer":
        self.n_terms = dims_of(matrix)[0]
        return self

    def transform(self, matrix) -> DenseMatrix:
        m, _ = dims_of(matrix)
        if self.n_terms is None or m != self.n_terms:
            raise ShapeMismatch(self.n_terms, m)
        return DenseMatrix.from_array(as_array(matrix))


class TfidfTransformer(Transformer):
    """
    Weights each raw term count by how rare the term is across the corpus.

    A term present in every document (e.g. "the") gets weight 0; a term absent
    from every fitted document gets the maximum ln(n + 1). Both n and df are
    smoothed by +1, so fit() is defined for any shape including 0 x n and m x 0.

    Not thread-safe: fit() replaces `weights`, so callers sharing one instance
    across threads must serialise fit() against transform(). transform() on a
    stable instance is re-entrant.

    Output rows are not length normalised (L2); add that as a separate
    Transformer if it is ever needed.
    """

    def __init__(self):
        self.weights: Optional[np.ndarray] = None

    @property
    def is_fitted(self) -> bool:
        return self.weights is not None

    def fit(self, matrix) -> "TfidfTransformer":
        X = as_array(matrix)
        n = X.shape[1]
        df = np.count_nonzero(X, axis=1)
        idf = np.log((1.0 + n) / (1.0 + df.astype(np.float64)))
        idf.setflags(write=False)
        self.weights = idf
        return self

    def transform(self, matrix) -> DenseMatrix:
        # shape is checked before any cell is read
        m, _ = dims_of(matrix)
        if self.weights is None:
            raise ShapeMismatch(None, m)
        if m != self.weights.shape[0]:
            raise ShapeMismatch(self.weights.shape[0], m)
        X = as_array(matrix)
        return DenseMatrix.from_array(X * self.weights[:, np.newaxis])
