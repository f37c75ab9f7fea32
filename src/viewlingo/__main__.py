"""Command-line entry point for ViewLingo.

    python -m viewlingo status
    python -m viewlingo translate "Good morning" "Thank you" --to ja --from en
    python -m viewlingo scan menu.jpg --to en
"""

import argparse
import asyncio
import sys

from . import log
from .backends.ocr.tesseract import TesseractOCRBackend
from .cache import TranslationCache
from .config import Config
from .detection import LanguageDetector
from .languages import Language, parse_language
from .ocr import OCRService
from .orchestrator import TranslationOrchestrator
from .packs import LanguagePackRegistry, PackStatus
from .pipeline import CameraTranslator
from .sessions import SessionProvider, SessionRegistry

logger = log.get_logger("cli")


def _parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="viewlingo",
        description="Offline camera text translation",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config file (default: viewlingo.yml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Check which language packs are installed")

    translate = subparsers.add_parser("translate", help="Translate texts")
    translate.add_argument("texts", nargs="+", help="Texts to translate")
    translate.add_argument("--to", dest="target", default=None, help="Target language code")
    translate.add_argument("--from", dest="source", default=None, help="Source language code (default: detect)")

    scan = subparsers.add_parser("scan", help="Recognize and translate the text in an image")
    scan.add_argument("image", help="Path to an image file")
    scan.add_argument("--to", dest="target", default=None, help="Target language code")
    scan.add_argument("--from", dest="source", default=None, help="Source language code (default: detect)")

    return parser.parse_args(argv)


def _build_orchestrator(config: Config, packs: LanguagePackRegistry) -> TranslationOrchestrator:
    """Wire cache, sessions and detector from configuration."""
    return TranslationOrchestrator(
        cache=TranslationCache(max_size=config.cache_size, ttl_seconds=config.cache_ttl),
        sessions=SessionRegistry(),
        detector=LanguageDetector(min_confidence=config.detection_confidence),
        provider=SessionProvider(packs),
    )


async def _run_status(packs: LanguagePackRegistry) -> int:
    await packs.check_all_statuses()
    for pair, status in sorted(packs.statuses.items(), key=lambda item: str(item[0])):
        marker = "✓" if status is PackStatus.AVAILABLE else "✗"
        print(f"  {marker} {pair}  {status.value}")
    return 0


async def _run_translate(orchestrator: TranslationOrchestrator, texts: list[str], target: str, source: str | None) -> int:
    translations = await orchestrator.translate_texts(texts, target, source_language=source)
    for text in texts:
        if text in translations:
            print(f"{text}\t{translations[text]}")
        else:
            print(f"{text}\t[not translated]")
    return 0 if translations else 1


async def _run_scan(config: Config, orchestrator: TranslationOrchestrator, image_path: str, target: str, source: str | None) -> int:
    from PIL import Image

    languages = [language for language in (parse_language(source), parse_language(target)) if language]
    backend = TesseractOCRBackend(languages or [Language.ENGLISH])
    ocr = OCRService(
        backend,
        confidence_threshold=config.ocr_confidence,
        max_detected_texts=config.max_detected_texts,
        min_interval=config.ocr_min_interval,
        mode=config.recognition_mode,
    )
    translator = CameraTranslator(ocr, orchestrator, target, source_language=source)

    with Image.open(image_path) as image:
        results = await translator.process_frame(image)

    if not results:
        print("No text translated.")
        return 1
    for result in results:
        box = result.span.bounding_box
        print(f"[{box.x:.2f},{box.y:.2f} {box.width:.2f}x{box.height:.2f}] {result.text}\t{result.translation}")
    return 0


async def _run(args: argparse.Namespace, config: Config) -> int:
    packs = LanguagePackRegistry()
    if args.command == "status":
        return await _run_status(packs)

    target = args.target or config.target_language
    source = args.source or config.source_language
    if parse_language(target) is None:
        print(f"Error: unsupported target language '{target}'")
        return 2

    await packs.check_all_statuses()
    orchestrator = _build_orchestrator(config, packs)
    if args.command == "translate":
        return await _run_translate(orchestrator, args.texts, target, source)
    return await _run_scan(config, orchestrator, args.image, target, source)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = _parse_arguments(argv)
    config = Config.load(args.config)
    log.configure(level=config.log_level, debug=args.debug)
    logger.debug("config loaded", path=args.config or "default", target=config.target_language)

    try:
        return asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
