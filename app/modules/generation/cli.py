from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

import httpx
from fastapi.encoders import jsonable_encoder

from app.core.config import settings
from app.core.logging import setup_logging
from app.modules.generation.config import GenerationConfig
from app.modules.generation.service import (
    DEFAULT_FLASHCARD_COUNT,
    DEFAULT_QUIZ_COUNT,
    LearningToolsService,
)


def _load_text(args: argparse.Namespace) -> str:
    if args.text and args.text_file:
        raise SystemExit("Provide either --text or --text-file, not both")
    if args.text_file:
        return Path(args.text_file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    raise SystemExit("--text or --text-file is required")


def _add_text_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--text", "-t", help="Input text")
    p.add_argument("--text-file", help="Path to a file containing the input text")


async def _run(args: argparse.Namespace) -> object:
    text = _load_text(args)
    config = GenerationConfig.from_settings(settings)
    async with httpx.AsyncClient() as http:
        svc = LearningToolsService(config, http=http)
        if args.cmd == "summarize":
            return {"summary": await svc.summarize(text)}
        if args.cmd == "quiz":
            return {"quiz": await svc.generate_quiz(text, args.count)}
        if args.cmd == "flashcards":
            return {"flashcards": await svc.generate_flashcards(text, args.count)}
        return {"answer": await svc.answer(text, args.question)}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="learnova-gen", description="Run a generation task against the configured providers"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    _add_text_args(sub.add_parser("summarize", help="Summarize text"))

    q = sub.add_parser("quiz", help="Generate multiple-choice questions")
    _add_text_args(q)
    q.add_argument("--count", "-n", type=int, default=DEFAULT_QUIZ_COUNT)

    f = sub.add_parser("flashcards", help="Generate flashcards")
    _add_text_args(f)
    f.add_argument("--count", "-n", type=int, default=DEFAULT_FLASHCARD_COUNT)

    qa = sub.add_parser("qa", help="Answer a question about the text")
    _add_text_args(qa)
    qa.add_argument("--question", "-q", required=True)

    args = parser.parse_args(argv)
    setup_logging()
    result = asyncio.run(_run(args))
    print(json.dumps(jsonable_encoder(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
