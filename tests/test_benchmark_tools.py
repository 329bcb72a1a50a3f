"""
Tests for benchmark input generation, benchmark runs and result aggregation
"""

import os
from pathlib import Path

from benchmark import run_benchmark, save_results
from plot_results import aggregate_runs, speedups, generate_summary_table
from scripts.generate_benchmark_inputs import generate_file


def result(name, runtime, maps=1, success=True):
    return {
        'benchmark_name': name, 'description': name, 'success': success,
        'num_map_tasks': maps, 'num_reduce_tasks': 2, 'input_size_mb': 1.0,
        'total_runtime_seconds': runtime, 'throughput_mbps': 1.0 / runtime,
    }


class TestGenerateInputs:
    """Tests for replicating a source text"""

    def test_generates_target_size(self, temp_dir):
        output_path = Path(temp_dir) / 'big.txt'
        size = generate_file(output_path, 1000, b"hello world\n")

        assert size == 1000
        assert output_path.read_bytes().startswith(b"hello world\nhello world\n")


class TestRunBenchmark:
    """Tests for in-process benchmark runs"""

    def test_runs_job_and_reports_metrics(self, sample_input_file, temp_dir):
        config = {"name": "tiny", "input": os.path.basename(sample_input_file),
                  "maps": 2, "reduces": 2, "description": "tiny"}

        r = run_benchmark(config, 1, os.path.dirname(sample_input_file),
                          os.path.join(temp_dir, 'results'))

        assert r['success'] is True
        assert r['unique_words'] > 0
        assert r['num_map_tasks'] == 2

    def test_missing_input_is_skipped(self, temp_dir):
        config = {"name": "none", "input": "missing.txt", "maps": 1, "reduces": 1,
                  "description": "missing"}

        assert run_benchmark(config, 1, temp_dir, temp_dir) is None

    def test_save_results_writes_json_and_csv(self, temp_dir):
        json_file, csv_file = save_results([result('a', 1.0)], 'ts', temp_dir)

        assert json_file.exists()
        assert csv_file.exists()
        assert json_file.name == "results_ts.json"
        assert csv_file.name == "results_ts.csv"


class TestAggregation:
    """Tests for aggregating benchmark runs"""

    def test_aggregates_successful_runs_only(self):
        aggregated = aggregate_runs([
            result('map_scaling_1', 2.0),
            result('map_scaling_1', 4.0),
            result('map_scaling_1', 100.0, success=False),
        ])

        assert aggregated['map_scaling_1']['avg_runtime'] == 3.0
        assert aggregated['map_scaling_1']['num_runs'] == 2

    def test_speedups_relative_to_fewest_map_tasks(self):
        aggregated = aggregate_runs([
            result('map_scaling_1', 4.0, maps=1),
            result('map_scaling_4', 2.0, maps=4),
        ])

        assert speedups(aggregated) == [(1, 1.0), (4, 2.0)]

    def test_summary_table(self, temp_dir):
        output_file = os.path.join(temp_dir, 'table.md')
        generate_summary_table(aggregate_runs([result('input_size_small', 1.0)]), output_file)

        with open(output_file) as f:
            assert 'input_size_small' in f.read()
