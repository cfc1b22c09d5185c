"""
Export the reference classifier as a complete asset directory.

Writes a TorchScript model, label map and vocabulary for one variant so
the pipeline and benchmark can run without a production model. The
exported weights are random; predictions are meaningless.

Usage:
    python -m sentiment_pipeline.export_model --vocab_path vocab.txt
    python -m sentiment_pipeline.export_model --vocab_path vocab.txt --variant distil --assets_root assets
"""

import argparse
import json
import logging
import shutil
from pathlib import Path
from typing import Any, Sequence

from .model import create_model_from_config, export_torchscript
from .resources import ModelVariant
from .utils import load_config, set_seed, setup_logging_from_config
from .vocabulary import Vocabulary

logger = logging.getLogger("sentiment_pipeline")


DEFAULT_LABELS = ("negative", "neutral", "positive")


def export_reference_assets(
    vocab_path: str | Path,
    assets_root: str | Path,
    variant: ModelVariant = ModelVariant.TINY,
    config: dict[str, Any] | None = None,
    labels: Sequence[str] = DEFAULT_LABELS,
) -> Path:
    """
    Build, trace and write the reference model plus its vocab and labels.
    
    Args:
        vocab_path: Source vocab.txt
        assets_root: Root of the assets directory
        variant: Variant slot to write into
        config: Pipeline configuration for model sizes
        labels: Ordered label list
        
    Returns:
        Path of the exported TorchScript file
        
    Raises:
        LoadError: If the vocabulary cannot be read
        MissingSpecialToken: If the vocabulary lacks a reserved token
    """
    config = config or {}
    assets_root = Path(assets_root)
    
    vocabulary = Vocabulary.load(vocab_path)
    vocabulary.validate_special_tokens()
    
    model_config = dict(config.get("model", {}))
    model_config["num_classes"] = len(labels)
    # IDs can exceed len(vocabulary) when the file repeats a token
    vocab_size = max(vocabulary.lookup(token) for token in vocabulary) + 1
    model = create_model_from_config({**config, "model": model_config}, vocab_size=vocab_size)

    seq_length = config.get("tokenizer", {}).get("max_length", 128)
    model_path = export_torchscript(model, assets_root / variant.model_path, seq_length=seq_length)
    
    labels_path = assets_root / variant.labels_path
    labels_path.parent.mkdir(parents=True, exist_ok=True)
    with open(labels_path, "w", encoding="utf-8") as f:
        json.dump({"labels": list(labels)}, f, indent=2)
    logger.info(f"Label map saved to {labels_path}")
    
    vocab_dst = assets_root / variant.vocab_path
    vocab_dst.parent.mkdir(parents=True, exist_ok=True)
    if Path(vocab_path).resolve() != vocab_dst.resolve():
        shutil.copy(vocab_path, vocab_dst)
        logger.info(f"Vocabulary copied to {vocab_dst}")
    
    return model_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export reference model assets")
    parser.add_argument("--vocab_path", type=str, required=True, help="Path to vocab.txt")
    parser.add_argument("--config", type=str, default="configs/pipeline_config.yaml", help="Path to configuration file")
    parser.add_argument("--assets_root", type=str, default=None, help="Assets directory (overrides config)")
    parser.add_argument("--variant", type=str, default="tiny", help="Variant slot to write")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    
    config = load_config(args.config)
    setup_logging_from_config(config)
    set_seed(config.get("seed", 42))
    
    assets_root = args.assets_root or config.get("assets", {}).get("root", "assets")
    
    model_path = export_reference_assets(
        vocab_path=args.vocab_path,
        assets_root=assets_root,
        variant=ModelVariant(args.variant),
        config=config,
    )
    logger.info(f"Export completed: {model_path}")


if __name__ == "__main__":
    main()
