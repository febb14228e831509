"""
idf_weight.py
- Validate count matrix → fit IDF → reweight → save artifacts (+ optional WandB logging)
- 예)
    python -m src.pipelines.idf_weight --input data/counts.csv
    python -m src.pipelines.idf_weight --input data/train.npz --apply data/test.npz --fmt npz --wandb
"""
from __future__ import annotations
import argparse, os, time
from typing import Optional
import numpy as np
import wandb
from src.validate import load_count_matrix_with_stats
from src.io_utils.storage import timestamp_dir, save_matrix, save_meta
from src.weighting.idf import fit_idf, transform

WANDB_PROJECT = os.getenv("WANDB_PROJECT", "idf-weighting")
WANDB_ENTITY  = os.getenv("WANDB_ENTITY")


def run(input_path: str, apply_path: Optional[str] = None, outdir: str = "artifacts",
        fmt: str = "csv", use_wandb: bool = False, index_col=None) -> str:
    # 1. 데이터 불러오기
    try:
        X, terms, docs, stats = load_count_matrix_with_stats(input_path, index_col)
    except (FileNotFoundError, ValueError) as e:
        raise SystemExit(f"[VALIDATE] {e}")
    print(f"[VALIDATE] {input_path} terms={stats['terms']} docs={stats['documents']} nnz={stats['nonzero']}")

    # 2. IDF 학습 및 가중치 적용 (--apply 가 있으면 학습 행렬과 별도 행렬에 적용)
    tr, W = fit_idf(X)
    if apply_path:
        try:
            Y, apply_terms, docs, apply_stats = load_count_matrix_with_stats(apply_path, index_col)
        except (FileNotFoundError, ValueError) as e:
            raise SystemExit(f"[VALIDATE] {e}")
        print(f"[VALIDATE] {apply_path} terms={apply_stats['terms']} docs={apply_stats['documents']}")
        # ShapeMismatch 는 ValueError
        try:
            W = transform(tr, Y)
        except ValueError as e:
            raise SystemExit(f"[IDF] {e}")
        terms = apply_terms if apply_terms is not None else terms

    # 3. 로컬 저장
    out = timestamp_dir(outdir)
    values = W.to_numpy()
    matrix_path = save_matrix(values, out, fmt=fmt, terms=terms, docs=docs)
    weights = tr.weights
    meta = {
        "input": input_path,
        "apply": apply_path,
        "terms": int(values.shape[0]),
        "documents": int(values.shape[1]),
        "idf_min": float(weights.min()) if weights.size else None,
        "idf_max": float(weights.max()) if weights.size else None,
        "zero_weight_terms": int(np.count_nonzero(weights == 0)),
    }
    meta_path = save_meta(meta, out)
    print(f"[IDF] saved to {out}/ (terms={values.shape[0]}, docs={values.shape[1]})")

    # 4. WandB 로깅 + Artifact 업로드
    if use_wandb:
        wandb.init(
            project=WANDB_PROJECT,
            entity=WANDB_ENTITY,
            job_type="idf_weight",
            name=f"idf_{time.strftime('%Y%m%d-%H%M%S')}",
        )
        wandb.config.update({"input": input_path, "apply": apply_path, "fmt": fmt})
        wandb.log({k: v for k, v in meta.items() if isinstance(v, (int, float))})

        artifact = wandb.Artifact(
            name="idf-weighted",
            type="dataset",
            description=f"IDF-weighted term-document matrix from {os.path.basename(input_path)}",
        )
        artifact.add_file(matrix_path)
        artifact.add_file(meta_path)
        wandb.log_artifact(artifact)
        wandb.finish()

    return out


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Reweight a term-document count matrix by smoothed IDF")
    ap.add_argument("--input", required=True, help="count matrix to fit on (.csv/.npz/.npy), rows=terms")
    ap.add_argument("--apply", default="", help="optional matrix to reweight with the fitted weights")
    ap.add_argument("--outdir", default="artifacts")
    ap.add_argument("--fmt", choices=["csv", "npz"], default="csv")
    ap.add_argument("--wandb", action="store_true", help="log run + artifact to Weights & Biases")
    ap.add_argument("--index-col", type=int, default=None, help="csv column holding term labels (default: first column if non-numeric)")
    args = ap.parse_args()
    run(args.input, args.apply or None, args.outdir, args.fmt, args.wandb, args.index_col)
