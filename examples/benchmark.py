"""
Performance benchmark for the ranking engine.

Compares sequential and partitioned ranking across candidate counts and
worker counts.
"""

import asyncio
import json
import statistics
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from similar_records.core.engine import RankingEngine
from similar_records.models.record import Post

from sample_data.generate_sample_data import generate_posts


async def time_ranking(engine: RankingEngine, query: Post, candidates: List[Post],
                       parallel: bool, workers: int = None, runs: int = 5) -> Dict[str, Any]:
    """Time repeated rankings of the same candidates."""
    times = []
    for _ in range(runs):
        start_time = time.time()
        if parallel:
            result = await engine.rank_parallel(query, candidates, top_n=10, workers=workers)
        else:
            result = await engine.rank(query, candidates, top_n=10)
        times.append(time.time() - start_time)

    return {
        'avg_time': statistics.mean(times),
        'min_time': min(times),
        'max_time': max(times),
        'results_count': len(result)
    }


async def benchmark_scaling(engine: RankingEngine) -> Dict[str, Any]:
    """Benchmark sequential against parallel ranking as candidates grow."""
    print("📈 Benchmarking Scaling Performance...")

    results = {}
    for count in [100, 1000, 5000, 20000]:
        print(f"\n  📊 Testing with {count} candidates...")
        query, candidates = generate_posts(count=count)

        sequential = await time_ranking(engine, query, candidates, parallel=False)
        parallel = await time_ranking(engine, query, candidates, parallel=True)

        results[count] = {'sequential': sequential, 'parallel': parallel}
        speedup = sequential['avg_time'] / parallel['avg_time']
        print(f"    Sequential: {sequential['avg_time']:.3f}s, "
              f"Parallel: {parallel['avg_time']:.3f}s ({speedup:.1f}x)")

    return results


async def benchmark_workers(engine: RankingEngine) -> Dict[str, Any]:
    """Benchmark partition counts on a fixed candidate set."""
    print("\n⚙️  Benchmarking Worker Counts...")

    query, candidates = generate_posts(count=10000)
    results = {}
    for workers in [1, 2, 4, 8, 16]:
        results[workers] = await time_ranking(engine, query, candidates, parallel=True, workers=workers)
        print(f"    {workers:>2} partitions: {results[workers]['avg_time']:.3f}s")

    return results


async def run_comprehensive_benchmark():
    """Run comprehensive performance benchmark."""
    print("🚀 Similar Records - Performance Benchmark")
    print("=" * 60)

    engine = RankingEngine()
    try:
        scaling_results = await benchmark_scaling(engine)
        worker_results = await benchmark_workers(engine)
        stats = engine.get_stats()
    finally:
        await engine.close()

    print("\n📊 BENCHMARK REPORT")
    print("=" * 60)
    print(f"  Rankings run: {stats['total_rankings']} ({stats['parallel_rankings']} parallel)")
    print(f"  Mean per-ranking time: {stats['avg_process_time_ms']:.2f}ms")

    benchmark_results = {
        'timestamp': datetime.now().isoformat(),
        'max_workers': stats['max_workers'],
        'scaling': scaling_results,
        'workers': worker_results
    }

    results_file = Path(__file__).parent / "benchmark_results.json"
    with open(results_file, 'w') as f:
        json.dump(benchmark_results, f, indent=2, default=str)

    print(f"\n💾 Results saved to: {results_file}")
    print("\n✅ Benchmark completed!")


async def main():
    """Main benchmark entry point."""
    try:
        await run_comprehensive_benchmark()
    except Exception as e:
        print(f"❌ Benchmark failed: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
