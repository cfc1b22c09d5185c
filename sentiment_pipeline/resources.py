"""
Model resources and their lifecycle.

Loads the vocabulary, label list and classifier for a model variant and
tracks whether they are ready for use. Switching variants tears the old
classifier down before the new one is loaded.
"""

import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, Sequence

import numpy as np

from .exceptions import LoadError, NotInitialized
from .model import DEFAULT_NUM_THREADS, TorchClassifier
from .tokenizer import MAX_SEQ_LENGTH, WordPieceTokenizer
from .vocabulary import Vocabulary

logger = logging.getLogger("sentiment_pipeline")


class ModelVariant(Enum):
    """Supported classifier variants."""

    TINY = "tiny"
    DISTIL = "distil"

    @property
    def display_name(self) -> str:
        return {"tiny": "TinyBERT", "distil": "DistilBERT"}[self.value]

    @property
    def model_path(self) -> Path:
        return Path("models") / self.value / "model.pt"

    @property
    def vocab_path(self) -> Path:
        return Path("tokenizer") / self.value / "vocab.txt"

    @property
    def labels_path(self) -> Path:
        return Path("models") / self.value / "label_map.json"


class ModelState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"


class Classifier(Protocol):
    """Anything that maps (input_ids, attention_mask) to a logits vector."""

    def run(self, input_ids: np.ndarray, attention_mask: np.ndarray) -> Sequence[float]:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class LoadedModel:
    """Read-only bundle of everything one analysis call needs."""

    variant: ModelVariant
    vocabulary: Vocabulary
    tokenizer: WordPieceTokenizer
    labels: tuple[str, ...]
    classifier: Classifier


def parse_labels(data: Any, source: str = "label map") -> tuple[str, ...]:
    """
    Extract the ordered label list from a label_map.json document.

    Args:
        data: Decoded JSON, expected {"labels": [...]}
        source: Name used in error messages

    Returns:
        Tuple of label strings

    Raises:
        LoadError: If the document is malformed
    """
    if not isinstance(data, dict) or "labels" not in data:
        raise LoadError(f"{source} must be an object with a 'labels' list")

    labels = data["labels"]
    if not isinstance(labels, list) or not labels:
        raise LoadError(f"{source} 'labels' must be a non-empty list")

    if not all(isinstance(label, str) for label in labels):
        raise LoadError(f"{source} 'labels' must contain only strings")

    return tuple(labels)


def load_labels(path: str | Path) -> tuple[str, ...]:
    """Load the ordered label list from a label_map.json file."""
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read labels from {path}: {e}") from e

    labels = parse_labels(data, source=str(path))
    logger.info(f"Labels loaded: {list(labels)}")
    return labels


class AssetLoader:
    """
    Loads model variants from an assets directory laid out as

        models/<variant>/model.pt
        models/<variant>/label_map.json
        tokenizer/<variant>/vocab.txt
    """

    def __init__(
        self,
        root: str | Path,
        num_threads: int = DEFAULT_NUM_THREADS,
        max_length: int = MAX_SEQ_LENGTH,
        keep_sep_on_truncate: bool = False,
    ):
        self.root = Path(root)
        self.num_threads = num_threads
        self.max_length = max_length
        self.keep_sep_on_truncate = keep_sep_on_truncate

    def load(self, variant: ModelVariant) -> LoadedModel:
        """
        Load every resource for a variant.

        Raises:
            LoadError: If any asset is missing or corrupt
            MissingSpecialToken: If the vocabulary lacks a reserved token
        """
        vocabulary = Vocabulary.load(self.root / variant.vocab_path)
        tokenizer = WordPieceTokenizer(
            vocabulary,
            max_length=self.max_length,
            keep_sep_on_truncate=self.keep_sep_on_truncate,
        )
        labels = load_labels(self.root / variant.labels_path)
        classifier = TorchClassifier.load(
            self.root / variant.model_path,
            num_threads=self.num_threads,
        )

        return LoadedModel(
            variant=variant,
            vocabulary=vocabulary,
            tokenizer=tokenizer,
            labels=labels,
            classifier=classifier,
        )


class ModelLoader(Protocol):
    def load(self, variant: ModelVariant) -> LoadedModel:
        ...


class ModelService:
    """
    Owns the loaded model and its lifecycle.

    States: UNLOADED -> LOADING -> READY. Loading a different variant
    while READY disposes the current one first. Callers that reach the
    service while it is LOADING get NotInitialized instead of blocking.
    """

    def __init__(self, loader: ModelLoader):
        self.loader = loader
        self._lock = threading.Lock()
        self._state = ModelState.UNLOADED
        self._loaded: LoadedModel | None = None

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is ModelState.READY

    @property
    def current_variant(self) -> ModelVariant | None:
        loaded = self._loaded
        return loaded.variant if loaded is not None else None

    def initialize(self, variant: ModelVariant = ModelVariant.TINY) -> LoadedModel:
        """
        Load a variant, replacing any other loaded variant.

        Args:
            variant: Variant to load

        Returns:
            The ready model bundle

        Raises:
            NotInitialized: If another initialization is in progress
            LoadError: If loading fails; the service is left UNLOADED
            MissingSpecialToken: If the vocabulary is malformed
        """
        if not self._lock.acquire(blocking=False):
            raise NotInitialized("Model is already being loaded")

        try:
            loaded = self._loaded
            if self._state is ModelState.READY and loaded is not None and loaded.variant is variant:
                return loaded

            self._state = ModelState.LOADING
            self._release()

            logger.info(f"Loading model variant {variant.display_name}...")
            try:
                loaded = self.loader.load(variant)
            except Exception:
                self._state = ModelState.UNLOADED
                raise

            self._loaded = loaded
            self._state = ModelState.READY
            logger.info(f"Model variant {variant.display_name} ready")
            return loaded
        finally:
            self._lock.release()

    def switch_model(self, variant: ModelVariant) -> LoadedModel:
        return self.initialize(variant)

    def require_ready(self) -> LoadedModel:
        """
        Get the loaded model bundle.

        Raises:
            NotInitialized: If the service is not READY
        """
        loaded = self._loaded
        if self._state is not ModelState.READY or loaded is None:
            raise NotInitialized(
                f"Model is {self._state.value}. Call initialize() first."
            )
        return loaded

    def dispose(self) -> None:
        """Release resources and return to UNLOADED."""
        with self._lock:
            self._release()
            self._state = ModelState.UNLOADED

    def _release(self) -> None:
        loaded = self._loaded
        self._loaded = None
        if loaded is not None:
            loaded.classifier.close()
            logger.info(f"Released model variant {loaded.variant.display_name}")
