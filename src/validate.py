"""
validate.py
- Load a term-document count matrix (.npz / .npy / .csv) → schema validate (pydantic) → float array.
- Output: (values, terms, docs, stats) ready for the weighting module.
- CSV: header row = document labels; a string first column = term labels. Numeric term-ID columns need index_col=0.
- 실행 코드
    python -c "from src.validate import load_count_matrix_with_stats as f; import pprint; _,_,_,s=f('data/counts.csv'); pprint.pprint(s)"
"""
# 1. 파일 로드 → 스키마 검증 → ndarray 반환(+통계)
from __future__ import annotations
import os
from typing import Dict, List, Optional, Tuple
import numpy as np
import pandas as pd
from pydantic import BaseModel, Field, ValidationError, field_validator
from scipy import sparse

# 2. 행렬 요약 스키마: 음수/NaN/inf 셀이 있으면 거부
class MatrixStats(BaseModel):
    path: str
    terms: int = Field(ge=0)
    documents: int = Field(ge=0)
    nonzero: int = Field(ge=0)
    min_value: Optional[float] = Field(default=None, ge=0)
    finite: bool

    @field_validator("finite")
    @classmethod
    def _must_be_finite(cls, v: bool) -> bool:
        if not v:
            raise ValueError("matrix contains NaN or infinite counts")
        return v

# 3. 포맷별 로더
#    csv 는 헤더 행을 문서 라벨로 사용한다.
#    index_col=None  : 첫 열이 문자열이면 용어 라벨(자동), 숫자 ID 용어 열은 문서로 읽히므로 명시 필요
#    index_col=0/"id": 해당 열을 용어 라벨로 사용
#    index_col=False : 라벨 열 없음
def _read(path: str, index_col=None) -> Tuple[np.ndarray, Optional[List[str]], Optional[List[str]]]:
    ext = os.path.splitext(path)[1].lower()
    if ext == ".npz":
        return sparse.load_npz(path).toarray(), None, None
    if ext == ".npy":
        return np.load(path), None, None
    if ext == ".csv":
        df = pd.read_csv(path)
        if index_col is None:
            if len(df.columns) and not pd.api.types.is_numeric_dtype(df[df.columns[0]]):
                index_col = df.columns[0]
        elif isinstance(index_col, bool):
            index_col = None
        elif isinstance(index_col, int):
            index_col = df.columns[index_col]
        terms = None
        if index_col is not None:
            df = df.set_index(index_col)
            terms = [str(t) for t in df.index]
        return df.to_numpy(), terms, [str(c) for c in df.columns]
    raise ValueError(f"unsupported matrix format: {ext or path}")

# 4. 검증 실행(라벨·통계 함께 반환)
def load_count_matrix_with_stats(path: str, index_col=None) -> tuple[np.ndarray, Optional[List[str]], Optional[List[str]], Dict[str, int | float | str | None]]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"No count matrix at {path}")
    raw, terms, docs = _read(path, index_col)
    try:
        X = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValueError(f"non-numeric cells in {path}: {e}") from e
    if X.ndim != 2:
        raise ValueError(f"expected a 2-D matrix in {path}, got ndim={X.ndim}")
    try:
        stats = MatrixStats(
            path=path,
            terms=X.shape[0],
            documents=X.shape[1],
            nonzero=int(np.count_nonzero(X)),
            min_value=float(np.nanmin(X)) if X.size and not np.isnan(X).all() else None,
            finite=bool(np.isfinite(X).all()),
        )
    except ValidationError as e:
        raise ValueError(f"invalid count matrix {path}: {e}") from e
    return X, terms, docs, stats.model_dump()

# 5. 호환 함수(행렬만 필요한 호출부용)
def load_count_matrix(path: str, index_col=None) -> np.ndarray:
    X, _, _, _ = load_count_matrix_with_stats(path, index_col)
    return X
