"""
Inference module for sentiment classification.

Runs text through tokenization, the classifier and softmax
post-processing, and packages the outcome as a ClassificationResult.
"""

import logging
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from . import codec
from .exceptions import InferenceError, InternalError, InvalidInput, LoadError
from .preprocessing import length_advisory, normalize, validate_text
from .resources import AssetLoader, ModelService, ModelVariant

logger = logging.getLogger("sentiment_pipeline")


CONFIDENCE_THRESHOLDS = {"high": 0.8, "medium": 0.6, "low": 0.0}
LABEL_EMOJI = {"positive": "😊", "negative": "😞"}
NEUTRAL_EMOJI = "😐"

Tracer = Callable[[str, dict[str, Any]], None]


def log_tracer(event: str, fields: dict[str, Any]) -> None:
    """Default tracer: emit trace events at DEBUG level."""
    if logger.isEnabledFor(logging.DEBUG):
        details = ", ".join(f"{key}={value}" for key, value in fields.items())
        logger.debug(f"{event}: {details}")


def get_confidence_level(confidence: float) -> str:
    """
    Get confidence level string from confidence score.

    Args:
        confidence: Confidence score (0-1)

    Returns:
        Confidence level: 'high', 'medium', or 'low'
    """
    if confidence >= CONFIDENCE_THRESHOLDS["high"]:
        return "high"
    elif confidence >= CONFIDENCE_THRESHOLDS["medium"]:
        return "medium"
    else:
        return "low"


@dataclass(frozen=True)
class ClassificationResult:
    """Result of a sentiment analysis call."""

    label: str
    confidence: float
    probabilities: Mapping[str, float]
    logits: tuple[float, ...]
    latency_ms: float

    @property
    def confidence_percentage(self) -> float:
        return self.confidence * 100.0

    @property
    def confidence_level(self) -> str:
        return get_confidence_level(self.confidence)

    @property
    def emoji(self) -> str:
        return LABEL_EMOJI.get(self.label, NEUTRAL_EMOJI)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "label": self.label,
            "confidence": round(self.confidence, 4),
            "confidence_level": self.confidence_level,
            "probabilities": {
                k: round(v, 4) for k, v in self.probabilities.items()
            },
            "logits": [round(v, 4) for v in self.logits],
            "latency_ms": round(self.latency_ms, 2),
        }

    def __str__(self) -> str:
        lines = [
            "ClassificationResult:",
            f"  Label: {self.label} {self.emoji}",
            f"  Confidence: {self.confidence_percentage:.2f}%",
            f"  Latency: {self.latency_ms:.2f}ms",
            "  Probabilities:",
        ]
        for label, probability in self.probabilities.items():
            lines.append(f"    {label}: {probability * 100:.2f}%")
        lines.append(f"  Raw Logits: {list(self.logits)}")
        return "\n".join(lines)


class SentimentPipeline:
    """
    Single-text sentiment analysis over a shared ModelService.

    Holds no state of its own beyond references, so several pipelines
    can share one service once it is ready.
    """

    def __init__(
        self,
        model_service: ModelService,
        tracer: Tracer | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            model_service: Service owning the loaded model
            tracer: Callback receiving (event, fields) trace events
        """
        self.model_service = model_service
        self.tracer = tracer or log_tracer

    def analyze(self, text: str) -> ClassificationResult:
        """
        Classify the sentiment of one text.

        Args:
            text: Input text

        Returns:
            ClassificationResult with label, probabilities and latency

        Raises:
            NotInitialized: If the model is not ready
            InvalidInput: If text is empty, whitespace-only or not a string
            InferenceError: If the classifier backend fails
            InternalError: If tensor shapes or label indices are inconsistent
        """
        start_time = time.perf_counter()

        loaded = self.model_service.require_ready()

        is_valid, error = validate_text(text)
        if not is_valid:
            raise InvalidInput(error)

        advisory = length_advisory(text)
        if advisory:
            logger.warning(advisory)

        text = normalize(text)
        self.tracer("analysis_started", {"chars": len(text), "variant": loaded.variant.value})

        tokenized = loaded.tokenizer.tokenize(text)
        expected_length = loaded.tokenizer.max_length
        if len(tokenized.input_ids) != expected_length:
            raise InternalError(
                f"Input IDs length mismatch: expected {expected_length}, "
                f"got {len(tokenized.input_ids)}"
            )
        if len(tokenized.attention_mask) != expected_length:
            raise InternalError(
                f"Attention mask length mismatch: expected {expected_length}, "
                f"got {len(tokenized.attention_mask)}"
            )
        self.tracer("tokenized", {"tokens": tokenized.token_count, "padded_to": expected_length})

        input_ids, attention_mask = codec.encode(tokenized)

        inference_start = time.perf_counter()
        raw_output = loaded.classifier.run(input_ids, attention_mask)
        try:
            logits = tuple(float(value) for value in raw_output)
            probabilities = codec.decode(logits)
        except (TypeError, ValueError) as e:
            raise InferenceError(f"Classifier returned unusable output: {e}") from e
        self.tracer(
            "inference_completed",
            {"ms": round((time.perf_counter() - inference_start) * 1000, 3), "logits": list(logits)},
        )

        predicted_class = codec.argmax(probabilities)
        labels = loaded.labels
        if predicted_class >= len(labels):
            raise InternalError(f"Invalid label index: {predicted_class}")
        if len(probabilities) != len(labels):
            raise InternalError(
                f"Classifier returned {len(probabilities)} logits for {len(labels)} labels"
            )

        latency_ms = (time.perf_counter() - start_time) * 1000

        result = ClassificationResult(
            label=labels[predicted_class],
            confidence=probabilities[predicted_class],
            probabilities=MappingProxyType(dict(zip(labels, probabilities))),
            logits=logits,
            latency_ms=latency_ms,
        )
        self.tracer(
            "analysis_completed",
            {"label": result.label, "confidence": round(result.confidence, 4), "latency_ms": round(latency_ms, 3)},
        )
        return result

    def __call__(self, text: str) -> ClassificationResult:
        return self.analyze(text)


def create_pipeline_from_config(
    config: dict[str, Any],
    tracer: Tracer | None = None,
) -> SentimentPipeline:
    """
    Build and initialize a pipeline from configuration dictionary.

    Args:
        config: Pipeline configuration
        tracer: Optional trace callback

    Returns:
        Ready SentimentPipeline

    Raises:
        LoadError: If the variant is unknown or its assets cannot be loaded
    """
    assets_config = config.get("assets", {})
    model_config = config.get("model", {})
    tokenizer_config = config.get("tokenizer", {})

    loader = AssetLoader(
        root=assets_config.get("root", "assets"),
        num_threads=model_config.get("num_threads", 4),
        max_length=tokenizer_config.get("max_length", 128),
        keep_sep_on_truncate=tokenizer_config.get("keep_sep_on_truncate", False),
    )
    variant_name = model_config.get("variant", "tiny")
    try:
        variant = ModelVariant(variant_name)
    except ValueError as e:
        choices = ", ".join(v.value for v in ModelVariant)
        raise LoadError(f"Unknown model variant {variant_name!r} (expected one of: {choices})") from e

    service = ModelService(loader)
    service.initialize(variant)

    return SentimentPipeline(service, tracer=tracer)
