"""Command line entry point for the hand-sign engine."""

import argparse
import json
import logging
import sys
from typing import List, Optional

import cv2

from .config.sequences import load_sequences
from .config.settings import load_config
from .core.constants import RANK_LEVELS, SIGN_DICTIONARY
from .core.exceptions import HandSignError
from .core.logging_config import configure_from_config
from .services.detection_service import DetectionPipeline
from .services.progress_store import ProgressStore

logger = logging.getLogger(__name__)


def cmd_detect(args, config) -> int:
    """Run the detector on one image and print the boxes."""
    if args.model:
        config.model_path = args.model
    if args.score_threshold is not None:
        config.score_threshold = args.score_threshold

    image = cv2.imread(args.image)
    if image is None:
        logger.error(f"Could not read image: {args.image}")
        return 1

    pipeline = DetectionPipeline.from_config(config)
    detections = pipeline.detect(image)

    if args.json:
        print(json.dumps([d.to_dict() for d in detections], ensure_ascii=False, indent=2))
    else:
        print(f"{len(detections)} detection(s) in {args.image}")
        for d in detections:
            print(f"  {d.label:<6} {d.score:.3f}  ({d.x1:.1f}, {d.y1:.1f}, {d.x2:.1f}, {d.y2:.1f})")
    return 0


def cmd_sequences(args, config) -> int:
    """Validate the sequence catalog and list its targets."""
    catalog = load_sequences(config.sequences_path or None)
    levels = [lvl for lvl in RANK_LEVELS if not args.level or lvl.key == args.level]

    for level in levels:
        targets = catalog.for_level(level.key)
        if not targets:
            continue
        print(f"[{level.key.upper()}] {level.title}")
        for target in targets:
            signs = " → ".join(SIGN_DICTIONARY[s]["cn"] for s in target.sequence)
            print(f"  {target.key:<16} {target.name}: {signs}")

    unleveled = [t for t in catalog if t.level is None]
    if unleveled and not args.level:
        print("[FREE]")
        for target in unleveled:
            print(f"  {target.name}: {' → '.join(target.sequence)}")
    return 0


def cmd_progress(args, config) -> int:
    """Show the persisted rank and best practice times."""
    store = ProgressStore(config.progress_path, history_limit=config.history_limit)
    print(f"Rank: {store.rank} ({store.rank_badge})")
    catalog = load_sequences(config.sequences_path or None)
    for target in catalog:
        times = store.best_times(target.key)
        if times:
            best = ", ".join(f"{r['time']:.2f}s" for r in times)
            print(f"  {target.name}: {best}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="handsign", description="Hand-sign detection and recognition tools")
    parser.add_argument("--config", default="config.json", help="Path to config.json")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Detect hand signs in an image")
    detect.add_argument("image", help="Image file")
    detect.add_argument("--model", help="ONNX model path (overrides config)")
    detect.add_argument("--score-threshold", type=float, help="Score threshold (overrides config)")
    detect.add_argument("--json", action="store_true", help="Print detections as JSON")
    detect.set_defaults(func=cmd_detect)

    sequences = subparsers.add_parser("sequences", help="Validate and list target sequences")
    sequences.add_argument("--level", choices=[lvl.key for lvl in RANK_LEVELS], help="Only this level")
    sequences.set_defaults(func=cmd_sequences)

    progress = subparsers.add_parser("progress", help="Show rank and practice records")
    progress.set_defaults(func=cmd_progress)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_from_config(config)

    try:
        return args.func(args, config)
    except HandSignError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
