"""
Unit tests for JobConfig
"""

import pytest

from common.config import JobConfig, DEFAULT_APP_NAME


class TestJobConfigFromEnv:
    """Tests for environment defaults and overrides"""

    def test_defaults(self, monkeypatch):
        for name in ['WORDCOUNT_NUM_MAP_TASKS', 'WORDCOUNT_NUM_REDUCE_TASKS',
                     'WORDCOUNT_PARALLELISM', 'WORDCOUNT_USE_COMBINER', 'WORDCOUNT_LOG_LEVEL']:
            monkeypatch.delenv(name, raising=False)

        config = JobConfig.from_env('in.txt', 'out')

        assert config.app_name == DEFAULT_APP_NAME
        assert config.num_map_tasks == 2
        assert config.num_reduce_tasks is None
        assert config.parallelism == 4
        assert config.use_combiner is True
        assert config.log_level == 'INFO'

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv('WORDCOUNT_NUM_MAP_TASKS', '8')
        monkeypatch.setenv('WORDCOUNT_NUM_REDUCE_TASKS', '3')
        monkeypatch.setenv('WORDCOUNT_USE_COMBINER', 'false')

        config = JobConfig.from_env('in.txt', 'out')

        assert config.num_map_tasks == 8
        assert config.num_reduce_tasks == 3
        assert config.use_combiner is False

    def test_explicit_overrides_win_and_none_falls_back(self, monkeypatch):
        monkeypatch.setenv('WORDCOUNT_NUM_MAP_TASKS', '8')

        config = JobConfig.from_env('in.txt', 'out', num_map_tasks=None, parallelism=1)

        assert config.num_map_tasks == 8
        assert config.parallelism == 1

    def test_non_integer_environment_value_raises(self, monkeypatch):
        monkeypatch.setenv('WORDCOUNT_PARALLELISM', 'lots')

        with pytest.raises(ValueError, match="WORDCOUNT_PARALLELISM"):
            JobConfig.from_env('in.txt', 'out')


class TestJobConfigValidate:
    """Tests for validation"""

    def test_valid_config(self):
        JobConfig('in.txt', 'out').validate()

    @pytest.mark.parametrize('overrides', [
        {'input_path': ''},
        {'output_path': ''},
        {'num_map_tasks': 0},
        {'num_reduce_tasks': 0},
        {'parallelism': -1},
        {'log_level': 'LOUD'},
    ])
    def test_invalid_settings_raise(self, overrides):
        settings = {'input_path': 'in.txt', 'output_path': 'out'}
        settings.update(overrides)

        with pytest.raises(ValueError):
            JobConfig(**settings).validate()
