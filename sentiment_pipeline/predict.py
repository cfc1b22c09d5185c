"""
Sentiment prediction script.

Usage:
    python -m sentiment_pipeline.predict --text "I love this product"
    python -m sentiment_pipeline.predict --input_path texts.txt --output_path preds.jsonl
"""

import argparse
import json
import logging
from pathlib import Path

from tqdm import tqdm

from .exceptions import InvalidInput
from .inference import create_pipeline_from_config
from .utils import load_config, setup_logging_from_config

logger = logging.getLogger("sentiment_pipeline")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sentiment prediction")
    parser.add_argument("--config", type=str, default="configs/pipeline_config.yaml", help="Path to configuration file")
    parser.add_argument("--text", type=str, action="append", default=[], help="Text to analyze (repeatable)")
    parser.add_argument("--input_path", type=str, default=None, help="Text file with one input per line")
    parser.add_argument("--output_path", type=str, default=None, help="Output JSON lines path (stdout if omitted)")
    parser.add_argument("--variant", type=str, default=None, help="Model variant (overrides config)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def read_texts(input_path: str) -> list[str]:
    with open(input_path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f]


def main() -> None:
    args = parse_args()

    config = load_config(args.config)
    setup_logging_from_config(config, verbose=args.verbose)

    if args.variant:
        config.setdefault("model", {})["variant"] = args.variant

    texts = list(args.text)
    if args.input_path:
        logger.info(f"Loading texts from {args.input_path}")
        texts.extend(read_texts(args.input_path))

    if not texts:
        raise SystemExit("No input: pass --text or --input_path")

    logger.info("Loading model...")
    pipeline = create_pipeline_from_config(config)

    records = []
    for text in tqdm(texts, desc="Predicting", disable=len(texts) < 10):
        try:
            result = pipeline.analyze(text)
        except InvalidInput as e:
            logger.warning(f"Skipping invalid input: {e}")
            records.append({"text": text, "error": str(e)})
            continue
        records.append({"text": text, **result.to_dict()})

    lines = [json.dumps(record, ensure_ascii=False) for record in records]

    if args.output_path:
        output_path = Path(args.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.info(f"Saved {len(records)} predictions to {output_path}")
    else:
        for line in lines:
            print(line)


if __name__ == "__main__":
    main()
