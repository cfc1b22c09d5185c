"""
Tests for the latency benchmark harness.
"""

import pytest

from sentiment_pipeline.benchmark import (
    SAMPLE_TEXTS,
    LatencyStats,
    run_benchmark,
    summarize_latencies,
)
from sentiment_pipeline.exceptions import NotInitialized
from sentiment_pipeline.inference import SentimentPipeline
from sentiment_pipeline.resources import ModelService


class TestSummarizeLatencies:
    """Tests for latency statistics."""
    
    def test_ten_values(self):
        stats = summarize_latencies([float(v) for v in range(10, 0, -1)])
        
        assert stats.count == 10
        assert stats.mean == pytest.approx(5.5)
        assert stats.median == pytest.approx(5.5)
        assert stats.p90 == 9.0
        assert stats.p99 == 10.0
        assert stats.min == 1.0
        assert stats.max == 10.0
    
    def test_odd_count_median(self):
        assert summarize_latencies([3.0, 1.0, 2.0]).median == 2.0
    
    def test_single_value(self):
        stats = summarize_latencies([7.0])
        assert stats.p90 == stats.p99 == stats.median == stats.min == stats.max == 7.0
    
    def test_empty(self):
        assert summarize_latencies([]) == LatencyStats(
            count=0, mean=0.0, median=0.0, p90=0.0, p99=0.0, min=0.0, max=0.0,
        )
    
    def test_to_dict(self):
        d = summarize_latencies([1.23456, 2.0]).to_dict()
        assert d["count"] == 2
        assert d["min"] == 1.235


class TestRunBenchmark:
    """Tests for repeated timed calls."""
    
    def test_sample_corpus(self):
        assert len(SAMPLE_TEXTS) == 50
        assert all(text.strip() for text in SAMPLE_TEXTS)
    
    def test_rotates_through_texts(self, pipeline):
        texts = ["short", "text"]
        samples = run_benchmark(pipeline, iterations=5, texts=texts)
        
        assert [s.text for s in samples] == ["short", "text", "short", "text", "short"]
        assert all(s.latency_ms >= 0 for s in samples)
        assert all(s.label == "negative" for s in samples)
    
    def test_warmup_not_recorded(self, pipeline, classifier):
        samples = run_benchmark(pipeline, iterations=3, texts=["short"], warmup=2)
        
        assert len(samples) == 3
        assert len(classifier.calls) == 5
    
    def test_statistics_over_run(self, pipeline):
        samples = run_benchmark(pipeline, iterations=20)
        stats = summarize_latencies([s.latency_ms for s in samples])
        
        assert stats.count == 20
        assert stats.min <= stats.median <= stats.p90 <= stats.p99 <= stats.max
    
    def test_empty_corpus(self, pipeline):
        with pytest.raises(ValueError):
            run_benchmark(pipeline, iterations=1, texts=[])
    
    def test_errors_propagate(self, loader):
        pipeline = SentimentPipeline(ModelService(loader))
        with pytest.raises(NotInitialized):
            run_benchmark(pipeline, iterations=1)
