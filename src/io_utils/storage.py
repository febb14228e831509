"""
storage.py
- Output utilities: timestamped folder, weighted matrix dump (CSV/NPZ) + meta JSON.
- The fitted weights are summarised in meta only; the transformer itself is not saved.
"""
from __future__ import annotations
import datetime as dt, json, os
from typing import Dict, List, Optional
import numpy as np
import pandas as pd
from scipy import sparse

def timestamp_dir(base: str = "artifacts") -> str:
    ts = dt.datetime.now().strftime("%Y%m%d-%H%M%S")
    out = f"{base}/{ts}"
    # 같은 초에 실행되면 -1, -2 ... 접미사
    k = 0
    while os.path.exists(out):
        k += 1
        out = f"{base}/{ts}-{k}"
    os.makedirs(out)
    return out

def save_matrix(values: np.ndarray, out_dir: str, fmt: str = "csv",
                terms: Optional[List[str]] = None, docs: Optional[List[str]] = None) -> str:
    if fmt == "csv":
        path = f"{out_dir}/weighted.csv"
        df = pd.DataFrame(values, columns=docs if docs is not None else [f"doc_{j}" for j in range(values.shape[1])])
        if terms is not None:
            df.insert(0, "term", terms)
        df.to_csv(path, index=False)
    elif fmt == "npz":
        path = f"{out_dir}/weighted.npz"
        sparse.save_npz(path, sparse.csr_matrix(values))
    else:
        raise ValueError(f"unsupported output format: {fmt}")
    return path

def save_meta(meta: Dict, out_dir: str) -> str:
    path = f"{out_dir}/meta.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)
    return path
