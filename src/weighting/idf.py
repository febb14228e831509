"""
idf.py (PURE)
- IDF fit/transform helpers (no file/HTTP).
"""
from __future__ import annotations
from typing import Tuple
from src.weighting.matrix import DenseMatrix
from src.weighting.transformers import TfidfTransformer

def fit_idf(matrix) -> Tuple[TfidfTransformer, DenseMatrix]:
    tr = TfidfTransformer()
    X = tr.fit_transform(matrix)
    return tr, X

def transform(tr: TfidfTransformer, matrix) -> DenseMatrix:
    return tr.transform(matrix)
