"""
Pytest configuration and fixtures for sentiment pipeline tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
import torch

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sentiment_pipeline.exceptions import InferenceError
from sentiment_pipeline.inference import SentimentPipeline
from sentiment_pipeline.model import SentimentClassifier
from sentiment_pipeline.resources import LoadedModel, ModelService, ModelVariant
from sentiment_pipeline.tokenizer import WordPieceTokenizer
from sentiment_pipeline.vocabulary import Vocabulary


VOCAB_TOKENS = [
    "[PAD]",
    "[UNK]",
    "[CLS]",
    "[SEP]",
    "short",
    "text",
    "i",
    "love",
    "this",
    "product",
    "word",
    "un",
    "##want",
    "##ed",
    "hello",
    "##s",
    "great",
]

LABELS = ("negative", "neutral", "positive")


class StaticClassifier:
    """Classifier stub returning fixed logits and recording its inputs."""
    
    def __init__(self, logits=(2.0, 0.0, 1.0)):
        self.logits = np.asarray(logits, dtype=np.float32)
        self.calls = []
        self.closed = False
    
    def run(self, input_ids, attention_mask):
        if self.closed:
            raise InferenceError("closed")
        self.calls.append((input_ids, attention_mask))
        return self.logits
    
    def close(self):
        self.closed = True


class FakeLoader:
    """Loader building LoadedModel bundles from in-memory resources."""
    
    def __init__(self, tokens=VOCAB_TOKENS, labels=LABELS, classifier_factory=StaticClassifier):
        self.tokens = tokens
        self.labels = labels
        self.classifier_factory = classifier_factory
        self.loaded = []
        self.error = None
    
    def load(self, variant):
        if self.error is not None:
            raise self.error
        vocabulary = Vocabulary.from_tokens(self.tokens)
        loaded = LoadedModel(
            variant=variant,
            vocabulary=vocabulary,
            tokenizer=WordPieceTokenizer(vocabulary),
            labels=tuple(self.labels),
            classifier=self.classifier_factory(),
        )
        self.loaded.append(loaded)
        return loaded


@pytest.fixture
def vocabulary() -> Vocabulary:
    """Small vocabulary with reserved tokens at IDs 0-3."""
    return Vocabulary.from_tokens(VOCAB_TOKENS)


@pytest.fixture
def tokenizer(vocabulary) -> WordPieceTokenizer:
    return WordPieceTokenizer(vocabulary)


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def model_service(loader) -> ModelService:
    """Initialized model service backed by the fake loader."""
    service = ModelService(loader)
    service.initialize(ModelVariant.TINY)
    return service


@pytest.fixture
def pipeline(model_service) -> SentimentPipeline:
    return SentimentPipeline(model_service)


@pytest.fixture
def classifier(model_service) -> StaticClassifier:
    return model_service.require_ready().classifier


@pytest.fixture
def torch_model(vocabulary) -> SentimentClassifier:
    """Small reference model for testing."""
    torch.manual_seed(0)
    model = SentimentClassifier(
        vocab_size=len(vocabulary),
        embedding_dim=16,
        hidden_dim=32,
        max_length=128,
        num_classes=3,
    )
    model.eval()
    return model


@pytest.fixture
def vocab_file(tmp_path) -> Path:
    path = tmp_path / "vocab.txt"
    path.write_text("\n".join(VOCAB_TOKENS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_texts() -> list[str]:
    """Sample texts for testing."""
    return [
        "I love this product",
        "short text",
        "hellos great word",
    ]


@pytest.fixture
def fake_loader_cls():
    """FakeLoader class, for tests that need custom resources or subclasses."""
    return FakeLoader
