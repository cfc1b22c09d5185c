"""
Latency benchmark for the sentiment pipeline.

Calls the pipeline repeatedly over a fixed corpus and reports order
statistics of the per-call latencies.

Usage:
    python -m sentiment_pipeline.benchmark --config configs/pipeline_config.yaml
    python -m sentiment_pipeline.benchmark --config configs/pipeline_config.yaml --variant distil --iterations 500
"""

import argparse
import logging
import math
from dataclasses import asdict, dataclass
from typing import Sequence

import numpy as np
from tqdm import tqdm

from .inference import SentimentPipeline, create_pipeline_from_config
from .utils import load_config, setup_logging_from_config

logger = logging.getLogger("sentiment_pipeline")


SAMPLE_TEXTS = [
    "I love this product! It works perfectly.",
    "This is terrible. I hate it.",
    "The weather is okay today.",
    "Amazing experience, highly recommended!",
    "Not bad, but could be better.",
    "Absolutely fantastic service!",
    "Very disappointed with the quality.",
    "It is what it is, nothing special.",
    "Best purchase I have ever made!",
    "Worst product ever, do not buy.",
    "Pretty good overall, satisfied.",
    "Excellent quality and fast delivery.",
    "Poor customer service, very slow.",
    "Average product, meets expectations.",
    "Outstanding performance and value!",
    "Completely useless, waste of money.",
    "Good value for the price.",
    "Perfect for my needs, love it!",
    "Not worth the money at all.",
    "Decent product, nothing extraordinary.",
    "Superb quality, exceeded expectations!",
    "Terrible experience, would not recommend.",
    "Fair price, acceptable quality.",
    "Incredible features, very impressed!",
    "Below average, needs improvement.",
    "Great product, very happy with it.",
    "Awful quality, broke immediately.",
    "Satisfactory, does the job.",
    "Exceptional service, five stars!",
    "Very poor quality, avoid this.",
    "Nice design, works as expected.",
    "Brilliant solution to my problem!",
    "Disappointing results, not as advertised.",
    "Okay product, nothing special.",
    "Perfect fit, exactly what I needed!",
    "Waste of time and money.",
    "Good build quality, reliable.",
    "Outstanding customer support!",
    "Mediocre at best, overpriced.",
    "Excellent value, highly satisfied!",
    "Poor design, uncomfortable to use.",
    "Solid product, would buy again.",
    "Amazing features, love everything about it!",
    "Not good, many issues.",
    "Average performance, acceptable.",
    "Top quality, best in class!",
    "Very bad experience, regret buying.",
    "Nice and functional, good purchase.",
    "Exceptional quality, worth every penny!",
    "Subpar product, needs major improvements.",
]


@dataclass(frozen=True)
class BenchmarkSample:
    """One timed pipeline call."""

    text: str
    label: str
    confidence: float
    latency_ms: float


@dataclass(frozen=True)
class LatencyStats:
    """Order statistics over benchmark latencies, in milliseconds."""

    count: int
    mean: float
    median: float
    p90: float
    p99: float
    min: float
    max: float

    def to_dict(self) -> dict[str, float]:
        return {k: (v if k == "count" else round(v, 3)) for k, v in asdict(self).items()}


def _nearest_rank(sorted_values: np.ndarray, fraction: float) -> float:
    index = max(math.ceil(len(sorted_values) * fraction) - 1, 0)
    return float(sorted_values[index])


def summarize_latencies(latencies: Sequence[float]) -> LatencyStats:
    """
    Compute latency statistics.
    
    Percentiles use the nearest-rank method: the value at sorted index
    ceil(n * p) - 1. An empty input yields all zeros.
    
    Args:
        latencies: Per-call latencies in milliseconds
        
    Returns:
        LatencyStats
    """
    if len(latencies) == 0:
        return LatencyStats(count=0, mean=0.0, median=0.0, p90=0.0, p99=0.0, min=0.0, max=0.0)
    
    values = np.sort(np.asarray(latencies, dtype=np.float64))
    
    return LatencyStats(
        count=len(values),
        mean=float(np.mean(values)),
        median=float(np.median(values)),
        p90=_nearest_rank(values, 0.9),
        p99=_nearest_rank(values, 0.99),
        min=float(values[0]),
        max=float(values[-1]),
    )


def run_benchmark(
    pipeline: SentimentPipeline,
    iterations: int = 100,
    texts: Sequence[str] = SAMPLE_TEXTS,
    warmup: int = 0,
    show_progress: bool = False,
) -> list[BenchmarkSample]:
    """
    Time repeated pipeline calls, rotating through texts.
    
    Args:
        pipeline: Ready pipeline
        iterations: Number of timed calls
        texts: Corpus to rotate through
        warmup: Untimed calls made before measuring
        show_progress: Display a progress bar
        
    Returns:
        One BenchmarkSample per timed call
    """
    if not texts:
        raise ValueError("Benchmark corpus cannot be empty")
    
    for i in range(warmup):
        pipeline.analyze(texts[i % len(texts)])
    
    samples = []
    for i in tqdm(range(iterations), desc="Benchmarking", disable=not show_progress):
        text = texts[i % len(texts)]
        result = pipeline.analyze(text)
        samples.append(BenchmarkSample(
            text=text,
            label=result.label,
            confidence=result.confidence,
            latency_ms=result.latency_ms,
        ))
    
    return samples


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark sentiment pipeline latency")
    parser.add_argument("--config", type=str, default="configs/pipeline_config.yaml", help="Path to configuration file")
    parser.add_argument("--variant", type=str, default=None, help="Model variant (overrides config)")
    parser.add_argument("--iterations", type=int, default=None, help="Number of timed calls")
    parser.add_argument("--warmup", type=int, default=None, help="Number of untimed warmup calls")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    
    config = load_config(args.config)
    setup_logging_from_config(config, verbose=args.verbose)
    
    if args.variant:
        config.setdefault("model", {})["variant"] = args.variant
    
    benchmark_config = config.get("benchmark", {})
    iterations = args.iterations or benchmark_config.get("iterations", 100)
    warmup = args.warmup if args.warmup is not None else benchmark_config.get("warmup", 5)
    
    pipeline = create_pipeline_from_config(config)
    
    logger.info(f"Running {iterations} iterations ({warmup} warmup)...")
    samples = run_benchmark(pipeline, iterations=iterations, warmup=warmup, show_progress=True)
    stats = summarize_latencies([s.latency_ms for s in samples])
    
    print("\n" + "=" * 40)
    print("BENCHMARK RESULTS")
    print("=" * 40)
    print(f"Runs:    {stats.count}")
    print(f"Mean:    {stats.mean:.2f} ms")
    print(f"Median:  {stats.median:.2f} ms")
    print(f"P90:     {stats.p90:.2f} ms")
    print(f"P99:     {stats.p99:.2f} ms")
    print(f"Min:     {stats.min:.2f} ms")
    print(f"Max:     {stats.max:.2f} ms")
    print("=" * 40)


if __name__ == "__main__":
    main()
