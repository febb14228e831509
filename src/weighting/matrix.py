"""
matrix.py (PURE)
- Term-document container: rows = terms, columns = documents.
- DenseMatrix is the owned output type; as_array() reads any supported input.
"""
from __future__ import annotations
from typing import Protocol, Tuple, runtime_checkable
import numpy as np
import pandas as pd
from scipy import sparse


@runtime_checkable
class Matrix(Protocol):
    def dims(self) -> Tuple[int, int]: ...
    def at(self, i: int, j: int) -> float: ...


class DenseMatrix:
    """numpy float64 backed (m, n) matrix with indexed read/write."""

    def __init__(self, m: int, n: int):
        self._data = np.zeros((m, n), dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "DenseMatrix":
        arr = np.array(values, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"expected a 2-D matrix, got ndim={arr.ndim}")
        out = cls.__new__(cls)
        out._data = arr
        return out

    def dims(self) -> Tuple[int, int]:
        m, n = self._data.shape
        return int(m), int(n)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.dims()

    def at(self, i: int, j: int) -> float:
        return float(self._data[i, j])

    def set(self, i: int, j: int, v: float) -> None:
        self._data[i, j] = v

    def row(self, i: int) -> np.ndarray:
        return self._data[i].copy()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        return self._data if dtype is None else self._data.astype(dtype)

    def __repr__(self) -> str:
        m, n = self.dims()
        return f"DenseMatrix(m={m}, n={n})"


def _from_protocol(mat: Matrix) -> np.ndarray:
    m, n = mat.dims()
    arr = np.empty((m, n), dtype=np.float64)
    for i in range(m):
        for j in range(n):
            arr[i, j] = mat.at(i, j)
    return arr


def dims_of(matrix) -> Tuple[int, int]:
    """(m, n) of `matrix` without reading any cell."""
    if isinstance(matrix, DenseMatrix):
        return matrix.dims()
    if sparse.issparse(matrix) or isinstance(matrix, (np.ndarray, pd.DataFrame)):
        if len(matrix.shape) != 2:
            raise ValueError(f"expected a 2-D matrix, got ndim={len(matrix.shape)}")
        m, n = matrix.shape
        return int(m), int(n)
    if isinstance(matrix, (list, tuple)):
        return len(matrix), (len(matrix[0]) if len(matrix) else 0)
    if isinstance(matrix, Matrix):
        m, n = matrix.dims()
        return int(m), int(n)
    raise TypeError(f"unsupported matrix type: {type(matrix).__name__}")


def as_array(matrix) -> np.ndarray:
    """Read-only float64 (m, n) view of `matrix`; the caller's object is never written."""
    if isinstance(matrix, DenseMatrix):
        arr = matrix._data
    elif sparse.issparse(matrix):
        arr = matrix.toarray().astype(np.float64)
    elif isinstance(matrix, pd.DataFrame):
        arr = matrix.to_numpy(dtype=np.float64)
    elif isinstance(matrix, (np.ndarray, list, tuple)):
        arr = np.asarray(matrix, dtype=np.float64)
        # empty nested lists: [] -> (0, 0)
        if arr.ndim == 1 and arr.size == 0:
            arr = arr.reshape(0, 0)
    elif isinstance(matrix, Matrix):
        arr = _from_protocol(matrix)
    else:
        raise TypeError(f"unsupported matrix type: {type(matrix).__name__}")

    if arr.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got ndim={arr.ndim}")
    view = arr.view()
    view.setflags(write=False)
    return view
