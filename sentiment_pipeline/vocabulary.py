"""
Vocabulary store for WordPiece tokenization.

Maps subword strings to integer IDs, built once from a newline-delimited
vocab file and read-only afterwards.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .exceptions import LoadError, MissingSpecialToken

logger = logging.getLogger("sentiment_pipeline")


CLS_TOKEN = "[CLS]"
SEP_TOKEN = "[SEP]"
PAD_TOKEN = "[PAD]"
UNK_TOKEN = "[UNK]"

SPECIAL_TOKENS = (CLS_TOKEN, SEP_TOKEN, PAD_TOKEN, UNK_TOKEN)


class Vocabulary:
    """
    Immutable token -> ID mapping.
    
    IDs are assigned sequentially from 0 in the order tokens appear.
    A token listed twice keeps the ID of its last occurrence but its
    first position in iteration order, so iteration follows first
    appearance rather than ID order when the source repeats tokens.
    """
    
    def __init__(self, tokens: Iterable[str]):
        """
        Build the vocabulary.
        
        Args:
            tokens: Token strings in ID order. Surrounding whitespace is
                stripped and empty entries are skipped without consuming an ID.
        """
        token2id: dict[str, int] = {}
        index = 0
        for token in tokens:
            token = token.strip()
            if not token:
                continue
            token2id[token] = index
            index += 1
        
        self._token2id: Mapping[str, int] = MappingProxyType(token2id)
    
    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "Vocabulary":
        return cls(tokens)
    
    @classmethod
    def from_text(cls, text: str) -> "Vocabulary":
        """Build from raw vocab text, one token per line."""
        return cls(text.split("\n"))
    
    @classmethod
    def load(cls, path: str | Path) -> "Vocabulary":
        """
        Load vocabulary from a vocab.txt file.
        
        Args:
            path: Path to the vocab file
            
        Returns:
            Loaded Vocabulary
            
        Raises:
            LoadError: If the file is missing, unreadable or not UTF-8
        """
        path = Path(path)
        
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Cannot read vocabulary from {path}: {e}") from e
        
        vocabulary = cls.from_text(text)
        logger.info(f"Vocab loaded: {len(vocabulary)} tokens from {path}")
        return vocabulary
    
    def lookup(self, token: str) -> int | None:
        """Return the ID of token, or None if it is not in the vocabulary."""
        return self._token2id.get(token)
    
    def special_id(self, name: str) -> int:
        """
        Get the ID of a reserved token.
        
        Args:
            name: Reserved token string, e.g. "[CLS]"
            
        Returns:
            Token ID
            
        Raises:
            MissingSpecialToken: If the token is absent
        """
        token_id = self._token2id.get(name)
        if token_id is None:
            raise MissingSpecialToken(name)
        return token_id
    
    def validate_special_tokens(self) -> None:
        """Raise MissingSpecialToken for the first absent reserved token."""
        for name in SPECIAL_TOKENS:
            self.special_id(name)
    
    @property
    def cls_id(self) -> int:
        return self.special_id(CLS_TOKEN)
    
    @property
    def sep_id(self) -> int:
        return self.special_id(SEP_TOKEN)
    
    @property
    def pad_id(self) -> int:
        return self.special_id(PAD_TOKEN)
    
    @property
    def unk_id(self) -> int:
        return self.special_id(UNK_TOKEN)
    
    def __contains__(self, token: object) -> bool:
        return token in self._token2id
    
    def __len__(self) -> int:
        return len(self._token2id)
    
    def __iter__(self) -> Iterator[str]:
        return iter(self._token2id)
    
    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)})"
