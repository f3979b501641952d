#!/usr/bin/env python3
"""
Command-line interface for building book similarity graphs.

Usage:
    python -m bookgraph.cli build --input books.json --anchor OL45883W
    python -m bookgraph.cli build --input books.json --output graph.json
    python -m bookgraph.cli explain --input books.json OL45883W OL27448W
    python -m bookgraph.cli categories
    python -m bookgraph.cli serve --port 8000

Input files hold a JSON list of book records, or an object with a "books"
list. Each record needs an "id"; "sentiment" holds the five scores.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .core.config import get_settings
from .core.errors import InvalidEntityError
from .core.models import Entity

logger = logging.getLogger("bookgraph.cli")


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_entities(path: Path) -> list[Entity]:
    """
    Load books from a JSON file.

    Raises:
        InvalidEntityError: If the file does not hold book records
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    records = data.get("books") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise InvalidEntityError(f"{path} must contain a list of books")

    return [Entity.from_dict(record) for record in records]


def _write_json(payload: Any, output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %s", output)
    else:
        print(text)


def cmd_build(args: argparse.Namespace) -> int:
    """Build the similarity graph for a file of scored books."""
    from .graph import GraphBuilder, GraphSettings

    try:
        entities = load_entities(args.input)
        builder = GraphBuilder(GraphSettings.from_settings(get_settings()))
        graph = builder.build(entities, args.anchor)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read %s: %s", args.input, e)
        return 1
    except InvalidEntityError as e:
        logger.error("Invalid input: %s", e.message)
        return 1

    stats = graph.stats
    logger.info(
        "Graph built: %d books, %d edges (%d selected, %d kept, %d repairs)",
        stats.entity_count,
        len(graph.edges),
        stats.selected_count,
        stats.retained_count,
        stats.repair_count,
    )
    _write_json(graph.to_dict(), args.output)
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    """Explain the connection between two books in a file."""
    from .similarity import explain, similarity, similarity_label

    try:
        entities = {e.id: e for e in load_entities(args.input)}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read %s: %s", args.input, e)
        return 1
    except InvalidEntityError as e:
        logger.error("Invalid input: %s", e.message)
        return 1

    missing = [book_id for book_id in (args.first, args.second) if book_id not in entities]
    if missing:
        logger.error("Unknown book id(s): %s", ", ".join(missing))
        return 1

    a, b = entities[args.first], entities[args.second]
    score = similarity(a.vector, b.vector)

    print(f"{a.title or a.id} <-> {b.title or b.id}")
    print(f"Similarity: {score:.4f} ({similarity_label(score)})")
    print(explain(a, b, score))
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """Print the category overview graph."""
    from .graph import build_category_graph

    threshold = args.threshold if args.threshold is not None else get_settings().category_link_threshold
    _write_json(build_category_graph(threshold=threshold), args.output)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bookgraph.api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookgraph",
        description="Thematic similarity graphs over sentiment-scored books",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a book similarity graph")
    build.add_argument("--input", "-i", type=Path, required=True, help="JSON file of scored books")
    build.add_argument("--anchor", "-a", help="Book id every book must reach (default: first)")
    build.add_argument("--output", "-o", type=Path, help="Write graph JSON here instead of stdout")
    build.set_defaults(func=cmd_build)

    explain = subparsers.add_parser("explain", help="Explain why two books are connected")
    explain.add_argument("--input", "-i", type=Path, required=True, help="JSON file of scored books")
    explain.add_argument("first", help="First book id")
    explain.add_argument("second", help="Second book id")
    explain.set_defaults(func=cmd_explain)

    categories = subparsers.add_parser("categories", help="Print the category overview graph")
    categories.add_argument("--threshold", type=float, help="Minimum link weight (exclusive)")
    categories.add_argument("--output", "-o", type=Path, help="Write graph JSON here instead of stdout")
    categories.set_defaults(func=cmd_categories)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
