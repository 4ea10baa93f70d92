#!/usr/bin/env python3
"""
DeckSmith CLI - Generate a presentation from a brief

Runs the full pipeline: outline, per-slide content and design generation,
merge, layout with the style-guardian auto-fix loop, then rendering to .pptx.

Usage:
    python -m src.cli --topic "Edge AI" --audience "CTOs"
    python -m src.cli --topic "Edge AI" --audience "CTOs" --tone casual --slides 8
    python -m src.cli --topic "Q3 Review" --audience "Board" --source-file notes.md
    python -m src.cli --topic "Q3 Review" --audience "Board" --strict --no-render
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from src.core import get_settings, setup_logging, setup_tracing
from src.models import PipelineConfig, PipelineResult, Tone
from src.services.deck_builder import DeckBuilderService
from src.services.deck_builder.helpers import format_duration
from src.services.reasoning import get_reasoning_gateway
from src.services.renderer import PptxRenderer

logger = logging.getLogger(__name__)


def print_header(title: str):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def read_source_file(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return Path(path).read_text(encoding="utf-8")


def print_summary(result: PipelineResult) -> None:
    """Print the outcome of a pipeline run."""
    print_header("Result")

    if result.deck is not None:
        print(f"\n📊 {result.deck.metadata.title}")
        print(f"   Slides: {len(result.deck.slides)}")
        print(f"   Fix iterations: {result.iterations} (layout passes: {result.layout_calls})")
    if result.lint is not None:
        print(f"   Lint: {result.lint.error_count} errors, {result.lint.warning_count} warnings")
    if result.render is not None:
        if result.render.success:
            print(f"\n✅ Saved: {result.render.output_path}")
        else:
            print(f"\n⚠️  Rendering failed: {result.render.error}")

    for warning in result.warnings:
        print(f"\n⚠️  {warning.kind}: {warning.message}")
    if result.failure is not None:
        print(f"\n❌ {result.failure.kind}: {result.failure.message}")

    if result.step_timings:
        print("\n⏱  Timings:")
        for phase, duration_ms in result.step_timings.items():
            print(f"   {phase:<12} {format_duration(duration_ms)}")
    print(f"   {'total':<12} {format_duration(result.duration_ms)}")


async def generate(args: argparse.Namespace, source_content: Optional[str]) -> PipelineResult:
    settings = get_settings()
    overrides = {
        "auto_fix": not args.no_autofix,
        "stop_on_lint_error": args.strict,
        "render": not args.no_render,
    }
    if args.output_dir:
        overrides["output_dir"] = Path(args.output_dir)
    if args.max_iterations is not None:
        overrides["max_lint_iterations"] = args.max_iterations
    if args.save_spec:
        overrides["save_spec"] = True
    config = PipelineConfig.from_settings(settings, **overrides)

    service = DeckBuilderService(
        gateway=get_reasoning_gateway(settings),
        config=config,
        renderer=None if args.no_render else PptxRenderer(),
    )
    return await service.build({
        "topic": args.topic,
        "audience": args.audience,
        "tone": args.tone,
        "slide_count": args.slides,
        "source_content": source_content,
        "language": args.language,
        "author": args.author,
        "company": args.company,
    })


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="DeckSmith - Generate a presentation from a brief",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Pipeline:
  1. Outline the deck
  2. Generate content and design hints for every slide in parallel
  3. Merge, lay out and lint, auto-fixing errors (bounded iterations)
  4. Render to .pptx

Examples:
  python -m src.cli --topic "Edge AI" --audience "CTOs"
  python -m src.cli --topic "Edge AI" --audience "CTOs" --slides 8 --tone casual
  python -m src.cli --topic "Edge AI" --audience "CTOs" --no-autofix
        """
    )

    parser.add_argument("--topic", "-t", required=True, help="Presentation topic")
    parser.add_argument("--audience", "-a", required=True, help="Target audience")
    parser.add_argument(
        "--tone",
        choices=[t.value for t in Tone],
        default=Tone.PROFESSIONAL.value,
        help="Presentation tone (default: professional)"
    )
    parser.add_argument(
        "--slides", "-n",
        type=int,
        default=10,
        help="Number of slides, clamped to 5-20 (default: 10)"
    )
    parser.add_argument("--source-file", "-f", help="Text or markdown file to draw content from")
    parser.add_argument("--language", choices=["en", "ko", "ja", "zh"], default="en", help="Deck language")
    parser.add_argument("--author", help="Author shown in the deck metadata")
    parser.add_argument("--company", help="Company shown in the deck metadata")
    parser.add_argument("--output-dir", "-o", help="Output directory (default: from settings)")
    parser.add_argument(
        "--no-autofix",
        action="store_true",
        help="Report lint errors without applying fixes"
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Maximum auto-fix iterations (default: from settings)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when lint errors remain after auto-fix"
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Skip writing the .pptx file"
    )
    parser.add_argument(
        "--save-spec",
        action="store_true",
        help="Also write the deck document as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    setup_tracing()
    if not args.output_dir:
        get_settings().ensure_directories()

    print_header(f"DeckSmith: {args.topic}")
    try:
        source_content = read_source_file(args.source_file)
    except OSError as e:
        print(f"❌ Cannot read source file: {e}")
        return 2
    if args.source_file and not source_content:
        print(f"⚠️  Source file {args.source_file} is empty")

    result = asyncio.run(generate(args, source_content))
    print_summary(result)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
