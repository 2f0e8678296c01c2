"""CLI for diversity-aware selection and multi-signal ranking.

Interface layer stays thin: parse args, read JSON, delegate, format output.

Examples:
    contextrank mmr --input vectors.json --lambda 0.7 --top-k 3
    contextrank select --query "how do refunds work" --input passages.json
    contextrank rank --input docs.json --function Relevance:relevance:1.0
        --function Age:age_days:-0.5:zscore --strategy hybrid --top-k 5
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from contextrank.application.dto.ranking_dto import RankRequest
from contextrank.application.dto.selection_dto import SelectionRequest
from contextrank.config.composition import (
    STRATEGIES,
    build_normalizer,
    build_rank_use_case,
    build_select_use_case,
    build_strategy,
)
from contextrank.config.settings import AppSettings
from contextrank.domain.errors import DomainError, ValidationError
from contextrank.domain.models import WeightedScoringFunction
from contextrank.domain.services.mmr import compute_mmr
from contextrank.domain.services.scoring import FieldScoringFunction

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _read_json(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    return json.loads(Path(path).read_text(encoding="utf-8"))


def parse_function_spec(spec: str) -> WeightedScoringFunction[Any]:
    """Parse ``NAME:FIELD:WEIGHT[:NORMALIZER]`` into a weighted field scorer."""
    parts = spec.split(":")
    if len(parts) not in (3, 4):
        raise ValidationError(f"invalid --function '{spec}', expected NAME:FIELD:WEIGHT[:NORMALIZER]")
    name, field_name, weight_s = parts[:3]
    try:
        weight = float(weight_s)
    except ValueError:
        raise ValidationError(f"invalid weight '{weight_s}' in --function '{spec}'") from None
    normalizer = build_normalizer(parts[3]) if len(parts) == 4 else None
    return WeightedScoringFunction(FieldScoringFunction(name, field_name), weight, normalizer)


def _numbers(value: Any, what: str) -> list[float] | None:
    """Check a JSON value is a flat list of numbers; None passes through."""
    if value is None:
        return None
    if not isinstance(value, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in value
    ):
        raise ValidationError(f"{what} must be a JSON list of numbers")
    return value


def cmd_mmr(args: argparse.Namespace) -> int:
    """Select a diverse subset of vectors.

    Input JSON: {"query": [...], "vectors": [[...], ...]}
    """
    payload = _read_json(args.input)
    if not isinstance(payload, dict):
        raise ValidationError("mmr input must be an object with 'query' and 'vectors'")
    raw_vectors = payload.get("vectors") or []
    if not isinstance(raw_vectors, list):
        raise ValidationError("'vectors' must be a JSON list of vectors")
    picked = compute_mmr(
        [_numbers(v, f"vectors[{i}]") for i, v in enumerate(raw_vectors)],
        _numbers(payload.get("query"), "query"),
        lambda_mult=args.lambda_mult,
        top_k=args.top_k,
    )
    indices = [i for i, _ in picked]
    if args.json:
        print(json.dumps({"indices": indices}))
    else:
        for pos, idx in enumerate(indices, 1):
            print(f"[{pos}] index={idx}")
    return EXIT_OK


def cmd_select(args: argparse.Namespace) -> int:
    """Embed a query and passages, keep a diverse relevant subset.

    Input JSON: ["passage one", "passage two", ...]
    """
    passages = _read_json(args.input)
    if not isinstance(passages, list) or not all(isinstance(p, str) for p in passages):
        raise ValidationError("select input must be a JSON list of strings")

    uc = build_select_use_case(args.settings)
    selected = uc.execute(
        SelectionRequest(
            query=args.query, passages=passages, lambda_mult=args.lambda_mult, top_k=args.top_k
        )
    ).unwrap()

    if args.json:
        out = [{"index": p.index, "relevance": p.relevance, "text": p.text} for p in selected]
        print(json.dumps(out))
    else:
        for pos, p in enumerate(selected, 1):
            print(f"[{pos}] index={p.index} relevance={p.relevance:.3f} {p.text}")
    return EXIT_OK


def cmd_rank(args: argparse.Namespace) -> int:
    """Rank JSON objects by weighted numeric fields.

    Input JSON: [{"title": ..., "relevance": 0.9, ...}, ...]
    """
    items = _read_json(args.input)
    if not isinstance(items, list):
        raise ValidationError("rank input must be a JSON list of objects")
    functions = [parse_function_spec(s) for s in args.function or []]
    strategy = build_strategy(args.strategy, args.settings) if args.strategy else None

    uc = build_rank_use_case(args.settings)
    ranked = uc.execute(
        RankRequest(items=items, scoring_functions=functions, strategy=strategy, top_k=args.top_k)
    ).unwrap()

    if args.json:
        out = [
            {
                "rank": r.rank,
                "final_score": r.final_score,
                "scores": dict(r.individual_scores),
                "item": r.item,
            }
            for r in ranked
        ]
        print(json.dumps(out))
    else:
        for r in ranked:
            print(f"[{r.rank}] score={r.final_score:.4f} {json.dumps(r.item)}")
    return EXIT_OK


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contextrank", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    p_mmr = sub.add_parser("mmr", help="Diversity-aware selection (MMR)")
    p_mmr.add_argument("--input", required=True, help="JSON file ('-' for stdin)")
    p_mmr.add_argument(
        "--lambda",
        dest="lambda_mult",
        type=float,
        default=settings.mmr_lambda,
        help="Relevance/diversity trade-off in [0, 1]",
    )
    p_mmr.add_argument(
        "--top-k",
        type=int,
        default=settings.mmr_top_k,
        help="How many to select (default: MMR_TOP_K; the HTTP API selects all when omitted)",
    )
    p_mmr.add_argument("--json", action="store_true", help="Machine-readable output")
    p_mmr.set_defaults(func=cmd_mmr)

    p_sel = sub.add_parser("select", help="Embed passages and pick a diverse subset")
    p_sel.add_argument("--query", required=True)
    p_sel.add_argument("--input", required=True, help="JSON list of passages ('-' for stdin)")
    p_sel.add_argument("--lambda", dest="lambda_mult", type=float, default=settings.mmr_lambda)
    p_sel.add_argument(
        "--top-k",
        type=int,
        default=settings.mmr_top_k,
        help="How many passages to keep (default: MMR_TOP_K)",
    )
    p_sel.add_argument("--json", action="store_true", help="Machine-readable output")
    p_sel.set_defaults(func=cmd_select)

    p_rank = sub.add_parser("rank", help="Multi-signal ranking")
    p_rank.add_argument("--input", required=True, help="JSON file ('-' for stdin)")
    p_rank.add_argument(
        "--function",
        action="append",
        metavar="NAME:FIELD:WEIGHT[:NORMALIZER]",
        help="Scoring function over a numeric field (repeatable)",
    )
    p_rank.add_argument("--strategy", choices=STRATEGIES, default=None)
    p_rank.add_argument("--top-k", type=int, default=None)
    p_rank.add_argument("--json", action="store_true", help="Machine-readable output")
    p_rank.set_defaults(func=cmd_rank)

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = AppSettings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    args = build_parser(settings).parse_args(argv)
    args.settings = settings
    logger.debug("running command %s", args.command)
    try:
        return args.func(args)
    except ValidationError as err:
        print(f"✗ Invalid input: {err}", file=sys.stderr)
        return EXIT_USAGE
    except DomainError as err:
        print(f"✗ {type(err).__name__}: {err}", file=sys.stderr)
        return EXIT_FAILURE
    except (OSError, json.JSONDecodeError) as err:
        print(f"✗ Cannot read input: {err}", file=sys.stderr)
        return EXIT_USAGE


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
