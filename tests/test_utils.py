"""
Tests for utilities and asset export.
"""

import json
import logging

import pytest

from sentiment_pipeline.exceptions import MissingSpecialToken
from sentiment_pipeline.export_model import DEFAULT_LABELS, export_reference_assets
from sentiment_pipeline.resources import ModelVariant
from sentiment_pipeline.utils import (
    load_config,
    setup_logging,
    setup_logging_from_config,
)


class TestConfig:
    """Tests for YAML configuration."""
    
    def test_load_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "model:\n"
            "  variant: tiny\n"
            "  num_threads: 4\n"
            "tokenizer:\n"
            "  max_length: 128\n"
        )
    
        assert load_config(path) == {
            "model": {"variant": "tiny", "num_threads": 4},
            "tokenizer": {"max_length": 128},
        }
    
    def test_missing_config(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")
    
    def test_empty_config(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}


class TestLogging:
    """Tests for logging setup."""
    
    def test_setup_logging(self):
        logger = setup_logging(log_level="DEBUG")
        
        assert logger.name == "sentiment_pipeline"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
    
    def test_setup_logging_is_idempotent(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1
    
    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "pipeline.log"
        logger = setup_logging(log_file=str(log_file))
        
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        
        assert "hello" in log_file.read_text()
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    
    def test_from_config(self):
        assert setup_logging_from_config({"logging": {"level": "WARNING"}}).level == logging.WARNING
        assert setup_logging_from_config({}, verbose=True).level == logging.DEBUG


class TestExportReferenceAssets:
    """Tests for writing a reference asset directory."""
    
    def test_writes_layout(self, tmp_path, vocab_file):
        root = tmp_path / "assets"
        config = {"model": {"embedding_dim": 8, "hidden_dim": 16}}
        
        model_path = export_reference_assets(vocab_file, root, ModelVariant.TINY, config=config)
        
        assert model_path == root / ModelVariant.TINY.model_path
        assert model_path.exists()
        assert (root / ModelVariant.TINY.vocab_path).read_text() == vocab_file.read_text()
        
        labels = json.loads((root / ModelVariant.TINY.labels_path).read_text())
        assert labels == {"labels": list(DEFAULT_LABELS)}
    
    def test_rejects_vocab_without_special_tokens(self, tmp_path):
        vocab_path = tmp_path / "vocab.txt"
        vocab_path.write_text("hello\nworld\n")
        
        with pytest.raises(MissingSpecialToken):
            export_reference_assets(vocab_path, tmp_path / "assets")
