"""
Classifier invocation for sentiment classification.

Wraps a torch module (usually a TorchScript export) behind a fixed
signature: two int32 [1, seq_length] tensors in, one float32 logits
vector out. Also provides a small reference network used for smoke
runs and tests.
"""

import logging
from pathlib import Path
from typing import Any

import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F

from .exceptions import InferenceError, LoadError

logger = logging.getLogger("sentiment_pipeline")


DEFAULT_NUM_THREADS = 4


class SentimentClassifier(nn.Module):
    """
    Reference BERT-input-compatible classifier.

    Architecture:
    - Token and position embeddings
    - Masked mean pooling over non-padding positions
    - Fully connected classification head

    Accepts the same (input_ids, attention_mask) pair as exported
    BERT-style models, so it can stand in for them end to end.
    """

    def __init__(
        self,
        vocab_size: int,
        embedding_dim: int = 64,
        hidden_dim: int = 128,
        max_length: int = 128,
        dropout: float = 0.1,
        num_classes: int = 3,
        padding_idx: int = 0,
    ):
        """
        Initialize the model.

        Args:
            vocab_size: Size of vocabulary
            embedding_dim: Dimension of token embeddings
            hidden_dim: Dimension of the hidden layer
            max_length: Maximum sequence length
            dropout: Dropout probability
            num_classes: Number of output classes
            padding_idx: Index of padding token
        """
        super().__init__()

        self.vocab_size = vocab_size
        self.embedding_dim = embedding_dim
        self.hidden_dim = hidden_dim
        self.max_length = max_length
        self.dropout_rate = dropout
        self.num_classes = num_classes
        self.padding_idx = padding_idx

        self.embedding = nn.Embedding(
            num_embeddings=vocab_size,
            embedding_dim=embedding_dim,
            padding_idx=padding_idx,
        )
        self.position_embedding = nn.Embedding(max_length, embedding_dim)

        self.dropout = nn.Dropout(dropout)

        self.fc1 = nn.Linear(embedding_dim, hidden_dim)
        self.fc2 = nn.Linear(hidden_dim, num_classes)

        self._init_weights()

        logger.info(f"Model initialized with {self._count_parameters():,} parameters")

    def _init_weights(self) -> None:
        """Initialize model weights."""
        for name, param in self.named_parameters():
            if "weight" in name and param.dim() > 1:
                nn.init.xavier_uniform_(param)
            elif "bias" in name:
                nn.init.zeros_(param)

    def _count_parameters(self) -> int:
        """Count trainable parameters."""
        return sum(p.numel() for p in self.parameters() if p.requires_grad)

    def forward(
        self,
        input_ids: torch.Tensor,
        attention_mask: torch.Tensor,
    ) -> torch.Tensor:
        """
        Forward pass.

        Args:
            input_ids: Token indices [batch_size, seq_length]
            attention_mask: 1 for real tokens, 0 for padding [batch_size, seq_length]

        Returns:
            Logits tensor [batch_size, num_classes]
        """
        input_ids = input_ids.long()
        mask = attention_mask.unsqueeze(-1).float()

        positions = torch.arange(input_ids.size(1), device=input_ids.device)
        embedded = self.embedding(input_ids) + self.position_embedding(positions)
        embedded = self.dropout(embedded)

        summed = (embedded * mask).sum(dim=1)
        counts = mask.sum(dim=1).clamp(min=1.0)
        pooled = summed / counts

        hidden = F.relu(self.fc1(pooled))
        hidden = self.dropout(hidden)
        logits = self.fc2(hidden)

        return logits


def export_torchscript(
    model: nn.Module,
    output_path: str | Path,
    seq_length: int = 128,
) -> Path:
    """
    Trace a model to TorchScript with int32 [1, seq_length] example inputs.

    Args:
        model: Model taking (input_ids, attention_mask)
        output_path: Destination .pt file
        seq_length: Sequence length of the example inputs

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    model.eval()
    example_ids = torch.zeros((1, seq_length), dtype=torch.int32)
    example_mask = torch.ones((1, seq_length), dtype=torch.int32)

    with torch.no_grad():
        traced = torch.jit.trace(model, (example_ids, example_mask))
    traced.save(str(output_path))

    logger.info(f"TorchScript model saved to {output_path}")
    return output_path


class TorchClassifier:
    """
    Opaque classifier handle.

    Runs a module on one (input_ids, attention_mask) pair and returns
    the logits for that single example.
    """

    def __init__(self, module: nn.Module | torch.jit.ScriptModule, name: str = "classifier"):
        self.module = module
        self.name = name
        self.module.eval()

    @classmethod
    def load(
        cls,
        path: str | Path,
        num_threads: int = DEFAULT_NUM_THREADS,
    ) -> "TorchClassifier":
        """
        Load a TorchScript classifier.

        Args:
            path: Path to the .pt file
            num_threads: Intra-op thread count for the backend

        Returns:
            Loaded classifier

        Raises:
            LoadError: If the file is missing or not a valid TorchScript archive
        """
        path = Path(path)

        if not path.exists():
            raise LoadError(f"Classifier file not found: {path}")

        torch.set_num_threads(num_threads)

        try:
            module = torch.jit.load(str(path), map_location=torch.device("cpu"))
        except (RuntimeError, ValueError) as e:
            raise LoadError(f"Cannot load classifier from {path}: {e}") from e

        logger.info(f"Model loaded successfully: {path.name} ({num_threads} threads)")
        return cls(module, name=path.stem)

    def run(self, input_ids: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        """
        Run the classifier.

        Args:
            input_ids: int32 array [1, seq_length]
            attention_mask: int32 array [1, seq_length]

        Returns:
            float32 logits vector [num_classes]

        Raises:
            InferenceError: If the backend cannot execute
        """
        if self.module is None:
            raise InferenceError(f"Classifier {self.name!r} has been closed")

        try:
            ids_tensor = torch.from_numpy(np.ascontiguousarray(input_ids, dtype=np.int32))
            mask_tensor = torch.from_numpy(np.ascontiguousarray(attention_mask, dtype=np.int32))

            with torch.no_grad():
                output = self.module(ids_tensor, mask_tensor)
        except (RuntimeError, IndexError, TypeError, ValueError) as e:
            raise InferenceError(f"Classifier {self.name!r} failed: {e}") from e

        if not isinstance(output, torch.Tensor) or output.dim() != 2 or output.size(0) != 1:
            raise InferenceError(
                f"Classifier {self.name!r} returned unexpected output: {_describe(output)}"
            )

        return output[0].detach().to(torch.float32).cpu().numpy()

    def close(self) -> None:
        """Release the underlying module."""
        self.module = None

    def __call__(self, input_ids: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        return self.run(input_ids, attention_mask)


def _describe(output: Any) -> str:
    if isinstance(output, torch.Tensor):
        return f"tensor of shape {list(output.shape)}"
    return type(output).__name__


def create_model_from_config(config: dict[str, Any], vocab_size: int) -> SentimentClassifier:
    """
    Create the reference model from configuration dictionary.

    Args:
        config: Pipeline configuration
        vocab_size: Vocabulary size

    Returns:
        Initialized model
    """
    model_config = config.get("model", {})
    tokenizer_config = config.get("tokenizer", {})

    return SentimentClassifier(
        vocab_size=vocab_size,
        embedding_dim=model_config.get("embedding_dim", 64),
        hidden_dim=model_config.get("hidden_dim", 128),
        max_length=tokenizer_config.get("max_length", 128),
        dropout=model_config.get("dropout", 0.1),
        num_classes=model_config.get("num_classes", 3),
    )
