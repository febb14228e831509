import math
import numpy as np
import pytest
from scipy import sparse
from sklearn.feature_extraction.text import TfidfTransformer as SkTfidfTransformer

from src.weighting.matrix import DenseMatrix
from src.weighting.transformers import CountTransformer, ShapeMismatch, TfidfTransformer, Transformer

# rows: cat, dog / cols: 3 documents
CATS_AND_DOGS = [[1, 0, 2], [1, 1, 1]]


def test_cat_dog_scenario():
    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    assert abs(tr.weights[0] - math.log(4 / 3)) < 1e-12
    assert tr.weights[1] == 0.0

    out = tr.transform(CATS_AND_DOGS)
    np.testing.assert_allclose(out.row(0), [0.2877, 0.0, 0.5754], atol=1e-4)
    np.testing.assert_array_equal(out.row(1), [0.0, 0.0, 0.0])


def test_fit_returns_self_for_chaining():
    tr = TfidfTransformer()
    assert tr.fit(CATS_AND_DOGS) is tr
    assert tr.is_fitted


def test_fit_transform_equals_fit_then_transform():
    rng = np.random.default_rng(7)
    X = rng.integers(0, 4, size=(6, 9))
    a = TfidfTransformer().fit_transform(X)
    b = TfidfTransformer().fit(X).transform(X)
    np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())


def test_idf_non_increasing_in_document_frequency():
    # row i occurs in exactly i of 5 documents
    X = np.array([[1] * i + [0] * (5 - i) for i in range(6)])
    w = TfidfTransformer().fit(X).weights
    assert all(w[i] >= w[i + 1] for i in range(len(w) - 1))
    assert w[0] == pytest.approx(math.log(6))
    assert w[5] == 0.0


def test_magnitude_does_not_affect_document_frequency():
    w = TfidfTransformer().fit([[1, 0, 0], [100, 0, 0], [0.5, 0, 0]]).weights
    assert w[0] == w[1] == w[2]


def test_term_in_every_document_gives_zero_row():
    out = TfidfTransformer().fit_transform([[7, 3, 9, 1], [0, 1, 0, 0]])
    np.testing.assert_array_equal(out.row(0), np.zeros(4))
    assert out.at(1, 1) > 0


def test_transform_unfitted_raises():
    with pytest.raises(ShapeMismatch) as exc:
        TfidfTransformer().transform(CATS_AND_DOGS)
    assert exc.value.expected is None
    assert exc.value.actual == 2


def test_transform_row_mismatch_raises():
    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    with pytest.raises(ShapeMismatch) as exc:
        tr.transform([[1, 2, 3]])
    assert (exc.value.expected, exc.value.actual) == (2, 1)
    # ShapeMismatch is a ValueError
    with pytest.raises(ValueError):
        tr.transform([[1], [2], [3]])


def test_transform_accepts_different_document_count():
    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    out = tr.transform([[2, 0, 0, 0, 1], [4, 4, 4, 4, 4]])
    assert out.dims() == (2, 5)
    assert out.at(0, 0) == pytest.approx(2 * math.log(4 / 3))


def test_transform_leaves_input_untouched():
    X = np.array(CATS_AND_DOGS, dtype=float)
    before = X.copy()
    out = TfidfTransformer().fit_transform(X)
    np.testing.assert_array_equal(X, before)
    out.set(0, 0, 42.0)
    np.testing.assert_array_equal(X, before)


def test_refit_discards_previous_weights():
    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    tr.fit([[0, 0], [1, 1], [1, 0]])
    np.testing.assert_allclose(tr.weights, [math.log(3), 0.0, math.log(3 / 2)])
    with pytest.raises(ShapeMismatch):
        tr.transform(CATS_AND_DOGS)
    out = tr.transform([[1], [1], [1]])
    np.testing.assert_allclose(out.to_numpy().ravel(), tr.weights)


def test_weights_are_read_only():
    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    with pytest.raises(ValueError):
        tr.weights[0] = 1.0


def test_degenerate_shapes():
    tr = TfidfTransformer().fit(np.zeros((0, 4)))
    assert tr.weights.shape == (0,)
    assert tr.transform(np.zeros((0, 2))).dims() == (0, 2)

    tr = TfidfTransformer().fit(np.zeros((3, 0)))
    np.testing.assert_array_equal(tr.weights, np.zeros(3))
    assert tr.transform(np.zeros((3, 0))).dims() == (3, 0)

    assert TfidfTransformer().fit([]).weights.shape == (0,)


def test_accepts_sparse_and_dense_inputs():
    X = np.array(CATS_AND_DOGS, dtype=float)
    expected = TfidfTransformer().fit_transform(X).to_numpy()
    np.testing.assert_allclose(TfidfTransformer().fit_transform(sparse.csr_matrix(X)).to_numpy(), expected)
    np.testing.assert_allclose(TfidfTransformer().fit_transform(DenseMatrix.from_array(X)).to_numpy(), expected)


def test_matches_sklearn_smoothed_idf():
    # sklearn works on (docs, terms) and adds 1 to its smoothed idf
    rng = np.random.default_rng(0)
    X = rng.integers(0, 3, size=(8, 12))
    sk = SkTfidfTransformer(norm=None, smooth_idf=True).fit(X.T)
    w = TfidfTransformer().fit(X).weights
    np.testing.assert_allclose(w, sk.idf_ - 1.0)


def test_count_transformer_is_identity_weighting():
    tr = CountTransformer()
    assert isinstance(tr, Transformer)
    out = tr.fit_transform(CATS_AND_DOGS)
    np.testing.assert_array_equal(out.to_numpy(), np.array(CATS_AND_DOGS, dtype=float))
    with pytest.raises(ShapeMismatch):
        CountTransformer().transform(CATS_AND_DOGS)
    with pytest.raises(ShapeMismatch):
        tr.transform([[1, 2]])


class _CountingGrid:
    """dims()/at() container that records every cell read."""

    def __init__(self, m, n):
        self.m, self.n = m, n
        self.reads = 0

    def dims(self):
        return self.m, self.n

    def at(self, i, j):
        self.reads += 1
        return float((i + j) % 2)


def test_shape_checked_before_any_cell_is_read():
    grid = _CountingGrid(300, 300)
    with pytest.raises(ShapeMismatch):
        TfidfTransformer().transform(grid)
    assert grid.reads == 0

    tr = TfidfTransformer().fit(CATS_AND_DOGS)
    with pytest.raises(ShapeMismatch):
        tr.transform(grid)
    assert grid.reads == 0

    with pytest.raises(ShapeMismatch):
        CountTransformer().fit(CATS_AND_DOGS).transform(grid)
    assert grid.reads == 0


def test_sparse_mismatch_is_not_densified(monkeypatch):
    X = sparse.csr_matrix(np.ones((4, 3)))
    tr = TfidfTransformer().fit(CATS_AND_DOGS)

    def _fail(*args, **kwargs):
        raise AssertionError("densified before the shape check")

    monkeypatch.setattr(sparse.csr_matrix, "toarray", _fail)
    with pytest.raises(ShapeMismatch):
        tr.transform(X)


def test_protocol_container_matching_shape_is_weighted():
    grid = _CountingGrid(2, 4)
    out = TfidfTransformer().fit(CATS_AND_DOGS).transform(grid)
    assert grid.reads == 8
    assert out.at(0, 1) == pytest.approx(math.log(4 / 3))
    assert out.at(1, 1) == 0.0
