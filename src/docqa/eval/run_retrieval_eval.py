from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

import yaml

from ..config import EngineConfig, load_config
from ..engine import QueryEngine
from ..logging_setup import setup_logging
from .datasets import RetrievalQuestion, SourceDocument, load_documents, load_retrieval_questions
from .metrics import RetrievalMetrics, compute_metrics

logger = logging.getLogger(__name__)


def first_correct_rank(filenames: list[str], expected: list[str]) -> int | None:
    wanted = set(expected)
    for rank, name in enumerate(filenames, start=1):
        if name in wanted:
            return rank
    return None


def evaluate(
    documents: list[SourceDocument],
    questions: list[RetrievalQuestion],
    config: EngineConfig,
    k: int = 5,
) -> tuple[RetrievalMetrics, list[dict]]:
    engine = QueryEngine(config=config)
    owner = "eval"
    for d in documents:
        engine.add_text(d.text, d.filename, owner_id=owner)

    first_ranks: list[int | None] = []
    confidences: list[float] = []
    per_q: list[dict] = []

    for q in questions:
        result = engine.query(q.question, owner_id=owner, top_k=k)
        ranked_files = [s.filename for s in result.sources]
        hit_rank = first_correct_rank(ranked_files, q.expected_filenames)

        first_ranks.append(hit_rank)
        confidences.append(result.confidence)
        per_q.append({
            "id": q.id,
            "question": q.question,
            "query_type": result.query_type,
            "expected_filenames": q.expected_filenames,
            "first_correct_rank": hit_rank,
            "confidence": result.confidence,
            "answer": result.answer,
            "sources": [asdict(s) for s in result.sources],
        })

    return compute_metrics(first_ranks, confidences), per_q


def main() -> None:
    p = argparse.ArgumentParser(description="Evaluate retrieval and answer confidence on a labelled question set")
    p.add_argument("--docs", required=True, help="JSONL with {filename, text} per document")
    p.add_argument("--questions", required=True, help="JSONL retrieval questions")
    p.add_argument("--config", required=False, help="YAML engine config (optional)")
    p.add_argument("--k", type=int, default=5, help="Top-k to retrieve (default 5)")
    p.add_argument(
        "--outdir",
        default="results/runs",
        help="Output directory for run artifacts (default results/runs)",
    )
    args = p.parse_args()

    setup_logging()

    config = load_config(args.config) if args.config else EngineConfig()
    documents = load_documents(Path(args.docs))
    questions = load_retrieval_questions(Path(args.questions))
    logger.info("Loaded %d documents and %d questions", len(documents), len(questions))

    metrics, per_q = evaluate(documents, questions, config, k=args.k)

    run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(args.outdir) / f"docqa_{run_id}"
    run_dir.mkdir(parents=True, exist_ok=True)

    (run_dir / "engine_config.yaml").write_text(yaml.safe_dump(asdict(config), sort_keys=False), encoding="utf-8")
    (run_dir / "metrics.json").write_text(
        json.dumps(metrics.__dict__, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    (run_dir / "per_question.json").write_text(
        json.dumps(per_q, indent=2, ensure_ascii=False), encoding="utf-8"
    )

    print("=== Retrieval evaluation complete ===")
    print(f"Run directory: {run_dir}")
    print(f"Documents: {len(documents)}  Questions: {metrics.n}")
    print(f"Hit@1: {metrics.hit_at_1:.3f}  Hit@3: {metrics.hit_at_3:.3f}  Hit@5: {metrics.hit_at_5:.3f}")
    print(f"MRR: {metrics.mrr:.3f}  Miss rate: {metrics.miss_rate:.3f}  Mean confidence: {metrics.mean_confidence:.3f}")


if __name__ == "__main__":
    main()
