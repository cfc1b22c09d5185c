"""
Sentiment Pipeline Package

WordPiece tokenization and inference post-processing around an
on-device BERT-style sentiment classifier.
"""
from .exceptions import (
    InferenceError,
    InternalError,
    InvalidInput,
    LoadError,
    MissingSpecialToken,
    NotInitialized,
    SentimentError,
)
from .inference import ClassificationResult, SentimentPipeline, create_pipeline_from_config
from .model import SentimentClassifier, TorchClassifier
from .resources import AssetLoader, LoadedModel, ModelService, ModelState, ModelVariant
from .tokenizer import TokenizedInput, WordPieceTokenizer
from .vocabulary import Vocabulary

__all__ = [
    "AssetLoader",
    "ClassificationResult",
    "InferenceError",
    "InternalError",
    "InvalidInput",
    "LoadError",
    "LoadedModel",
    "MissingSpecialToken",
    "ModelService",
    "ModelState",
    "ModelVariant",
    "NotInitialized",
    "SentimentClassifier",
    "SentimentError",
    "SentimentPipeline",
    "TokenizedInput",
    "TorchClassifier",
    "Vocabulary",
    "WordPieceTokenizer",
    "create_pipeline_from_config",
]
