"""
WordPiece tokenization for BERT-style classifiers.

Converts free-form text into a fixed-length sequence of vocabulary IDs
plus an attention mask.
"""

import logging
from dataclasses import dataclass

from .vocabulary import UNK_TOKEN, Vocabulary

logger = logging.getLogger("sentiment_pipeline")


MAX_SEQ_LENGTH = 128
CONTINUATION_PREFIX = "##"


@dataclass(frozen=True)
class TokenizedInput:
    """Fixed-length token IDs and the matching attention mask."""

    input_ids: tuple[int, ...]
    attention_mask: tuple[int, ...]

    @property
    def token_count(self) -> int:
        """Number of non-padding positions."""
        return sum(self.attention_mask)

    def __len__(self) -> int:
        return len(self.input_ids)


class WordPieceTokenizer:
    """
    Greedy longest-match-first WordPiece tokenizer.

    Words are produced by lower-casing and splitting on single spaces;
    there is no punctuation or Unicode-aware segmentation.

    Long inputs are truncated to max_length, which can drop the trailing
    [SEP]. Pass keep_sep_on_truncate=True to overwrite the last slot with
    [SEP] instead.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        max_length: int = MAX_SEQ_LENGTH,
        keep_sep_on_truncate: bool = False,
    ):
        """
        Initialize the tokenizer.

        Args:
            vocabulary: Loaded vocabulary
            max_length: Output sequence length
            keep_sep_on_truncate: Reserve the last slot for [SEP] on overflow

        Raises:
            MissingSpecialToken: If a reserved token is absent
        """
        if max_length < 2:
            raise ValueError(f"max_length must be at least 2, got {max_length}")

        self.vocabulary = vocabulary
        self.max_length = max_length
        self.keep_sep_on_truncate = keep_sep_on_truncate

        self.cls_id = vocabulary.cls_id
        self.sep_id = vocabulary.sep_id
        self.pad_id = vocabulary.pad_id
        self.unk_id = vocabulary.unk_id

    @staticmethod
    def split_words(text: str) -> list[str]:
        """Lower-case text and split it on spaces, dropping empty words."""
        words = []
        for word in text.lower().split(" "):
            word = word.strip()
            if word:
                words.append(word)
        return words

    def wordpiece(self, word: str) -> list[int]:
        """
        Split a word into known subword IDs.

        Args:
            word: Single lower-cased word

        Returns:
            Subword IDs; characters with no match become [UNK]
        """
        token_id = self.vocabulary.lookup(word)
        if token_id is not None:
            return [token_id]

        ids = []
        start = 0
        while start < len(word):
            end = len(word)
            match = None
            while end > start:
                piece = word[start:end]
                if start > 0:
                    piece = CONTINUATION_PREFIX + piece
                match = self.vocabulary.lookup(piece)
                if match is not None:
                    break
                end -= 1

            if match is None:
                ids.append(self.unk_id)
                start += 1
            else:
                ids.append(match)
                start = end

        return ids

    def encode_words(self, text: str) -> list[int]:
        """Tokenize text to IDs framed by [CLS] and [SEP], without padding."""
        ids = [self.cls_id]

        for word in self.split_words(text):
            # A literal "[UNK]" word is a hit, not an out-of-vocabulary miss
            if word == UNK_TOKEN:
                ids.append(self.unk_id)
                continue
            ids.extend(self.wordpiece(word))

        ids.append(self.sep_id)
        return ids

    def pad_or_truncate(self, ids: list[int]) -> list[int]:
        """Pad with [PAD] or cut to exactly max_length."""
        if len(ids) > self.max_length:
            ids = ids[:self.max_length]
            if self.keep_sep_on_truncate:
                ids[-1] = self.sep_id
            return ids

        return ids + [self.pad_id] * (self.max_length - len(ids))

    def tokenize(self, text: str) -> TokenizedInput:
        """
        Tokenize text into fixed-length model input.

        Never fails on string input; the empty string yields
        [CLS, SEP, PAD, ...].

        Args:
            text: Raw text

        Returns:
            TokenizedInput of length max_length
        """
        ids = self.encode_words(text)
        raw_length = len(ids)

        input_ids = self.pad_or_truncate(ids)
        attention_mask = [0 if token_id == self.pad_id else 1 for token_id in input_ids]

        if raw_length > self.max_length:
            logger.debug(f"Truncated {raw_length} tokens to {self.max_length}")

        return TokenizedInput(
            input_ids=tuple(input_ids),
            attention_mask=tuple(attention_mask),
        )

    def __call__(self, text: str) -> TokenizedInput:
        return self.tokenize(text)
