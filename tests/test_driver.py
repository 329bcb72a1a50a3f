"""
Tests for the wordcount command line driver
"""

import json
import os

from common.output_writer import read_output
from driver.wordcount_driver import main, USAGE


class TestDriverArguments:
    """Tests for argument handling"""

    def test_no_arguments_prints_usage_and_exits_1(self, capsys):
        assert main([]) == 1
        assert USAGE in capsys.readouterr().err

    def test_missing_output_argument_exits_1(self, capsys, sample_input_file):
        assert main([sample_input_file]) == 1
        assert USAGE in capsys.readouterr().err

    def test_invalid_option_value_exits_1(self, capsys, sample_input_file, temp_dir):
        code = main([sample_input_file, os.path.join(temp_dir, 'out'), '--num-map-tasks', '0'])

        assert code == 1
        assert 'num_map_tasks' in capsys.readouterr().err

    def test_non_integer_option_exits_1(self, capsys, sample_input_file, temp_dir):
        code = main([sample_input_file, os.path.join(temp_dir, 'out'), '--num-map-tasks', 'abc'])

        assert code == 1
        err = capsys.readouterr().err
        assert 'invalid int value' in err
        assert USAGE in err

    def test_extra_positional_argument_exits_1(self, sample_input_file, temp_dir):
        assert main([sample_input_file, os.path.join(temp_dir, 'out'), 'extra']) == 1


class TestDriverRun:
    """Tests for running jobs through the driver"""

    def test_successful_run_prints_banner(self, capsys, sample_input_file, temp_dir):
        output_path = os.path.join(temp_dir, 'out')

        assert main([sample_input_file, output_path]) == 0

        out = capsys.readouterr().out
        assert '=' * 40 in out
        assert f"Job completed for input: {sample_input_file}" in out
        assert 'Total execution time:' in out
        assert read_output(output_path)['the'] == 4

    def test_existing_output_fails(self, sample_input_file, temp_dir):
        output_path = os.path.join(temp_dir, 'out')
        os.makedirs(output_path)

        assert main([sample_input_file, output_path]) == 1

    def test_overwrite_replaces_existing_output(self, sample_input_file, temp_dir):
        output_path = os.path.join(temp_dir, 'out')
        os.makedirs(output_path)

        assert main([sample_input_file, output_path, '--overwrite']) == 0
        assert read_output(output_path)['fox'] == 2

    def test_missing_input_fails(self, temp_dir):
        assert main([os.path.join(temp_dir, 'missing.txt'), os.path.join(temp_dir, 'out')]) == 1

    def test_job_file_and_metrics_options(self, sample_input_file, temp_dir, wordcount_job_file):
        output_path = os.path.join(temp_dir, 'out')
        metrics_file = os.path.join(temp_dir, 'metrics.json')

        code = main([sample_input_file, output_path,
                     '--job-file', wordcount_job_file,
                     '--num-map-tasks', '3', '--num-reduce-tasks', '2',
                     '--no-combiner', '--parallelism', '1',
                     '--metrics-file', metrics_file, '--app-name', 'custom'])

        assert code == 0
        with open(metrics_file) as f:
            metrics = json.load(f)
        assert metrics['app_name'] == 'custom'
        assert metrics['num_reduce_tasks'] == 2
        assert metrics['use_combiner'] is False
        assert sum(read_output(output_path).values()) == 32

    def test_bad_job_file_fails(self, sample_input_file, temp_dir):
        job_file = os.path.join(temp_dir, 'job.py')
        with open(job_file, 'w') as f:
            f.write("def reduce_function(key, values):\n    return sum(values)\n")

        assert main([sample_input_file, os.path.join(temp_dir, 'out'), '--job-file', job_file]) == 1

    def test_error_raised_inside_reducer_fails_job(self, sample_input_file, temp_dir):
        job_file = os.path.join(temp_dir, 'job.py')
        with open(job_file, 'w') as f:
            f.write("from worker.wordcount_job import map_function\n\n"
                    "def reduce_function(key, values):\n"
                    "    yield (key, sum(values) + 'x')\n")
        output_path = os.path.join(temp_dir, 'out')

        code = main([sample_input_file, output_path, '--job-file', job_file, '--no-combiner'])

        assert code == 1
        assert not os.path.exists(os.path.join(output_path, 'part-00000'))
