#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from pathlib import Path
from collections import defaultdict

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same benchmark.
    Returns dict: benchmark_name -> {avg_runtime, std_runtime, config, ...}
    """
    by_benchmark = defaultdict(list)

    for r in results:
        if r['success']:  # Only include successful runs
            by_benchmark[r['benchmark_name']].append(r)

    aggregated = {}
    for name, runs in by_benchmark.items():
        runtimes = [r['total_runtime_seconds'] for r in runs]
        throughputs = [r['throughput_mbps'] for r in runs]

        # Use first run for configuration data
        first = runs[0]

        aggregated[name] = {
            'benchmark_name': name,
            'description': first['description'],
            'num_map_tasks': first['num_map_tasks'],
            'num_reduce_tasks': first['num_reduce_tasks'],
            'input_size_mb': first['input_size_mb'],
            'avg_runtime': float(np.mean(runtimes)),
            'std_runtime': float(np.std(runtimes)),
            'min_runtime': float(np.min(runtimes)),
            'max_runtime': float(np.max(runtimes)),
            'avg_throughput': float(np.mean(throughputs)),
            'num_runs': len(runs)
        }

    return aggregated


def _save(output_file):
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_input_size_scaling(aggregated, output_file):
    """Plot runtime vs input size."""
    data = [(v['input_size_mb'], v['avg_runtime'], v['std_runtime'])
            for k, v in aggregated.items()
            if k.startswith('input_size_')]

    if not data:
        print("⚠️  No input size scaling data found")
        return False

    data.sort()
    sizes, runtimes, stds = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.errorbar(sizes, runtimes, yerr=stds, marker='o', capsize=5,
                 linewidth=2, markersize=8)
    plt.xlabel('Input Size (MB)', fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title('Word Count Performance: Input Size Scaling', fontsize=14, fontweight='bold')
    _save(output_file)
    return True


def plot_map_task_scaling(aggregated, output_file):
    """Plot runtime vs number of map tasks."""
    data = [(v['num_map_tasks'], v['avg_runtime'], v['std_runtime'])
            for k, v in aggregated.items()
            if k.startswith('map_scaling_')]

    if not data:
        print("⚠️  No map scaling data found")
        return False

    data.sort()
    map_tasks, runtimes, stds = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.errorbar(map_tasks, runtimes, yerr=stds, marker='s', capsize=5,
                 linewidth=2, markersize=8, color='orangered')
    plt.xlabel('Number of Map Tasks', fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title('Word Count Performance: Map Task Parallelism', fontsize=14, fontweight='bold')
    plt.xticks(map_tasks)
    _save(output_file)
    return True


def speedups(aggregated):
    """Speedup of each map_scaling_ benchmark relative to the fewest map tasks."""
    data = sorted((v['num_map_tasks'], v['avg_runtime'])
                  for k, v in aggregated.items()
                  if k.startswith('map_scaling_'))
    if len(data) < 2:
        return []
    baseline = data[0][1]
    return [(tasks, baseline / runtime if runtime > 0 else 0.0) for tasks, runtime in data]


def plot_speedup(aggregated, output_file):
    """Plot speedup for map task scaling."""
    data = speedups(aggregated)
    if not data:
        print("⚠️  Insufficient data for speedup plot")
        return False

    map_tasks, actual = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.plot(map_tasks, actual, marker='o', linewidth=2, markersize=8,
             label='Actual Speedup', color='blue')
    plt.plot(map_tasks, [t / map_tasks[0] for t in map_tasks], linestyle='--', linewidth=2,
             label='Ideal (Linear) Speedup', color='gray', alpha=0.7)
    plt.xlabel('Number of Map Tasks', fontsize=12)
    plt.ylabel('Speedup', fontsize=12)
    plt.title('Word Count Speedup vs Ideal Linear Speedup', fontsize=14, fontweight='bold')
    plt.xticks(map_tasks)
    plt.legend(fontsize=11)
    _save(output_file)
    return True


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Benchmark | Maps | Reduces | Input (MB) | Avg Runtime (s) | Std Dev | Throughput (MB/s) |",
        "|-----------|------|---------|------------|-----------------|---------|-------------------|"
    ]

    for name in sorted(aggregated.keys()):
        v = aggregated[name]
        lines.append(
            f"| {v['benchmark_name']:<21} | {v['num_map_tasks']:>4} | "
            f"{v['num_reduce_tasks']:>7} | {v['input_size_mb']:>10.2f} | "
            f"{v['avg_runtime']:>15.2f} | {v['std_runtime']:>7.3f} | "
            f"{v['avg_throughput']:>17.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines) + '\n')

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        return 1

    json_file = sys.argv[1]
    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        return 1

    results = load_results(json_file)
    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated {len(results)} runs into {len(aggregated)} benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)
    plot_input_size_scaling(aggregated, PLOTS_DIR / "1_input_size_scaling.png")
    plot_map_task_scaling(aggregated, PLOTS_DIR / "2_map_task_scaling.png")
    plot_speedup(aggregated, PLOTS_DIR / "3_speedup_analysis.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")
    return 0


if __name__ == "__main__":
    sys.exit(main())
