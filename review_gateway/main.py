from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import uvicorn

from review_gateway.adapters.factory import MODES, build_adapter
from review_gateway.api import create_app
from review_gateway.batching import Criteria, WorkItem
from review_gateway.config import GatewayConfig, load_task_settings
from review_gateway.pipeline_classify import ClassificationPipeline
from review_gateway.utils.io import read_json, write_json, write_text
from review_gateway.utils.log import configure_logging
from review_gateway.utils.time import utc_timestamp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Literature review gateway")
    parser.add_argument("--env-file", type=Path, default=None)
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP gateway")
    serve.add_argument("--mode", choices=MODES, default="live")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None)

    classify = sub.add_parser("classify", help="Screen articles from JSON files")
    classify.add_argument("--mode", choices=MODES, required=True)
    classify.add_argument("--criteria", type=Path, required=True)
    classify.add_argument("--articles", type=Path, required=True)
    classify.add_argument("--runs-dir", type=Path, default=Path("runs"))
    classify.add_argument("--batch-size", type=int, default=None)
    return parser


def load_criteria(path: Path) -> Criteria:
    raw = read_json(path)
    return Criteria(
        main_question=raw.get("mainQuestion") or "",
        inclusion=list(raw.get("inclusionCriteria") or []),
        exclusion=list(raw.get("exclusionCriteria") or []),
    )


def load_articles(path: Path) -> List[WorkItem]:
    return [
        WorkItem(id=entry["id"], title=entry.get("title") or "", abstract=entry.get("abstract") or "")
        for entry in read_json(path)
    ]


def run_classify(args: argparse.Namespace, config: GatewayConfig) -> Path:
    run_dir = args.runs_dir / utc_timestamp()
    raw_dir = run_dir / "raw"
    artifacts_dir = run_dir / "artifacts"
    for path in [raw_dir, artifacts_dir]:
        path.mkdir(parents=True, exist_ok=True)

    def save_raw(index: int, raw_text: str) -> None:
        write_text(raw_dir / f"batch_{index}.txt", raw_text)

    pipeline = ClassificationPipeline(
        build_adapter("gemini", args.mode, config),
        load_task_settings()["classify"],
        args.batch_size or config.batch_size,
        raw_sink=save_raw,
    )
    records = pipeline.run(load_criteria(args.criteria), load_articles(args.articles))
    results_path = artifacts_dir / "results.json"
    write_json(results_path, {"results": [record.to_dict() for record in records]})
    logger.info("[classify] wrote %d records to %s", len(records), results_path)
    return results_path


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = GatewayConfig.from_env(args.env_file)

    if args.command == "serve":
        app = create_app(config, mode=args.mode)
        port = args.port or config.port
        logger.info("[proxy] listening on port %d", port)
        uvicorn.run(app, host=args.host, port=port)
    else:
        run_classify(args, config)


if __name__ == "__main__":
    main()
