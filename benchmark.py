#!/usr/bin/env python3
"""
Automated benchmarking script for the word count engine.
Runs multiple job configurations in-process and collects performance metrics.
"""

import os
import sys
import csv
import json
import shutil
import argparse
from datetime import datetime
from pathlib import Path

from common.config import JobConfig, setup_logging
from common.output_writer import read_output
from coordinator.job_manager import JobManager

# Configuration
RESULTS_DIR = Path("benchmark_results")
INPUT_DIR = Path("shared") / "input"

# Benchmark configurations
BENCHMARKS = [
    # Experiment 1: Input Size Scaling (fixed parallelism)
    {"name": "input_size_small", "input": "story_sm.txt", "maps": 4, "reduces": 2,
     "description": "Small input, baseline"},
    {"name": "input_size_medium", "input": "story_medium.txt", "maps": 4, "reduces": 2,
     "description": "Medium input (~1MB)"},
    {"name": "input_size_large", "input": "story_large.txt", "maps": 4, "reduces": 2,
     "description": "Large input (~10MB)"},

    # Experiment 2: Map Task Scaling (fixed input)
    {"name": "map_scaling_1", "input": "story_large.txt", "maps": 1, "reduces": 2,
     "description": "1 map task"},
    {"name": "map_scaling_2", "input": "story_large.txt", "maps": 2, "reduces": 2,
     "description": "2 map tasks"},
    {"name": "map_scaling_4", "input": "story_large.txt", "maps": 4, "reduces": 2,
     "description": "4 map tasks"},
    {"name": "map_scaling_8", "input": "story_large.txt", "maps": 8, "reduces": 2,
     "description": "8 map tasks"},

    # Experiment 3: Combiner on/off
    {"name": "combiner_off", "input": "story_large.txt", "maps": 4, "reduces": 2,
     "combiner": False, "description": "4 maps, no combiner"},
]


def run_benchmark(config, run_number=1, input_dir=INPUT_DIR, results_dir=RESULTS_DIR):
    """
    Run a single benchmark configuration.

    Returns:
        Result dict, or None when the input file is missing
    """
    input_path = Path(input_dir) / config["input"]
    if not input_path.exists():
        print(f"❌ Input file not found: {input_path}, skipping {config['name']}")
        return None

    output_path = Path(results_dir) / "output" / f"{config['name']}_run{run_number}"
    job_config = JobConfig(
        input_path=str(input_path),
        output_path=str(output_path),
        app_name=f"WordCountBenchmark-{config['name']}",
        num_map_tasks=config["maps"],
        num_reduce_tasks=config["reduces"],
        use_combiner=config.get("combiner", True),
        overwrite=True
    )

    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Config: {config['maps']} maps, {config['reduces']} reduces")
    print(f"{'='*70}")

    manager = JobManager()
    success = True
    try:
        job = manager.run_job(job_config)
        unique_words = len(read_output(str(output_path)))
    except (OSError, RuntimeError) as e:
        print(f"  ❌ Job failed: {e}")
        success = False
        unique_words = 0
        job = None

    metrics = manager.metrics.get_metrics(job.job_id) if job else None
    input_size = os.path.getsize(input_path)
    runtime = metrics.total_time_ms / 1000 if metrics else 0.0

    return {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "job_id": job.job_id if job else "",
        "input_file": str(input_path),
        "input_size_bytes": input_size,
        "input_size_mb": round(input_size / 1024 / 1024, 2),
        "num_map_tasks": config["maps"],
        "num_reduce_tasks": config["reduces"],
        "use_combiner": job_config.use_combiner,
        "success": success,
        "total_runtime_seconds": round(runtime, 3),
        "throughput_mbps": round((input_size / 1024 / 1024) / runtime, 3) if runtime > 0 else 0,
        "unique_words": unique_words,
        "intermediate_size_bytes": metrics.intermediate_size_bytes if metrics else 0,
        "peak_memory_mb": round(metrics.peak_memory_bytes / 1024 / 1024, 1) if metrics else 0,
    }


def save_results(results, timestamp, results_dir=RESULTS_DIR):
    """Save results to JSON and CSV files."""
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)

    json_file = results_dir / f"results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    csv_file = results_dir / f"results_{timestamp}.csv"
    if results:
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<25} {'Maps':>5} {'Reduces':>7} {'Runtime':>10} {'Status':>10}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<25} {r['num_map_tasks']:>5} "
              f"{r['num_reduce_tasks']:>7} {r['total_runtime_seconds']:>9.2f}s "
              f"{'✓' if r['success'] else '✗':>10}")

    print(f"{'='*70}")
    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} benchmarks, {successful} successful, "
          f"{len(results) - successful} failed")


def main():
    parser = argparse.ArgumentParser(description="Word count benchmark suite")
    parser.add_argument("--runs", type=int, default=1, help="Runs per benchmark (default: 1)")
    parser.add_argument("--input-dir", default=str(INPUT_DIR), help="Directory with benchmark inputs")
    parser.add_argument("--results-dir", default=str(RESULTS_DIR), help="Directory for results")
    parser.add_argument("--keep-output", action="store_true", help="Keep job output directories")
    args = parser.parse_args()

    setup_logging(os.environ.get('WORDCOUNT_LOG_LEVEL', 'WARNING'))

    runs = max(1, args.runs)
    print(f"Running {len(BENCHMARKS)} benchmarks × {runs} runs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    all_results = []
    for config in BENCHMARKS:
        for run in range(1, runs + 1):
            result = run_benchmark(config, run, args.input_dir, args.results_dir)
            if result:
                all_results.append(result)

    if not args.keep_output:
        shutil.rmtree(Path(args.results_dir) / "output", ignore_errors=True)

    if not all_results:
        print("\n❌ No results collected")
        return 1

    json_file, _ = save_results(all_results, timestamp, args.results_dir)
    print_summary(all_results)
    print(f"\nGenerate plots: python plot_results.py {json_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
