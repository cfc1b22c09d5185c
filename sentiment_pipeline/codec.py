"""
Tensor codec between tokenizer output and classifier tensors.

Packs token IDs into int32 arrays and turns raw logits back into
a probability distribution.
"""

from typing import Sequence

import numpy as np

from .tokenizer import TokenizedInput


LOGIT_CLAMP = 50.0


def encode(tokenized: TokenizedInput) -> tuple[np.ndarray, np.ndarray]:
    """
    Pack tokenizer output as classifier input.

    Args:
        tokenized: Fixed-length tokenizer output

    Returns:
        Tuple of (input_ids, attention_mask), int32 arrays of shape [1, seq_length]

    Raises:
        ValueError: If the sequences are empty or differ in length
    """
    if len(tokenized.input_ids) == 0:
        raise ValueError("Cannot encode an empty token sequence")

    if len(tokenized.input_ids) != len(tokenized.attention_mask):
        raise ValueError(
            f"input_ids and attention_mask differ in length: "
            f"{len(tokenized.input_ids)} != {len(tokenized.attention_mask)}"
        )

    input_ids = np.asarray(tokenized.input_ids, dtype=np.int32).reshape(1, -1)
    attention_mask = np.asarray(tokenized.attention_mask, dtype=np.int32).reshape(1, -1)

    return input_ids, attention_mask


def decode(logits: Sequence[float]) -> list[float]:
    """
    Numerically stable softmax over raw logits.

    The maximum is subtracted and shifted values are clamped to
    [-LOGIT_CLAMP, LOGIT_CLAMP] before exponentiating.

    Args:
        logits: Raw classifier scores

    Returns:
        Probabilities, one per logit

    Raises:
        ValueError: If logits is empty or holds NaN or infinite values
    """
    values = np.asarray(logits, dtype=np.float64).reshape(-1)
    if values.size == 0:
        raise ValueError("Cannot decode empty logits")
    if not np.all(np.isfinite(values)):
        raise ValueError(f"Cannot decode non-finite logits: {values.tolist()}")

    shifted = np.clip(values - values.max(), -LOGIT_CLAMP, LOGIT_CLAMP)
    exp_values = np.exp(shifted)
    probabilities = exp_values / exp_values.sum()

    return probabilities.tolist()


def argmax(probabilities: Sequence[float]) -> int:
    """
    Index of the largest probability; ties go to the lowest index.

    Raises:
        ValueError: If probabilities is empty
    """
    if len(probabilities) == 0:
        raise ValueError("Cannot take argmax of empty probabilities")

    return int(np.argmax(np.asarray(probabilities)))
