"""
Job configuration for the word count engine.
Defaults come from the environment; the driver overrides them with CLI flags.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional


DEFAULT_APP_NAME = "WordCountBenchmark"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class JobConfig:
    """Settings for a single word count run"""
    input_path: str
    output_path: str
    app_name: str = DEFAULT_APP_NAME
    job_file: Optional[str] = None
    job_id: Optional[str] = None
    num_map_tasks: int = 2
    num_reduce_tasks: Optional[int] = None
    use_combiner: bool = True
    parallelism: int = 4
    overwrite: bool = False
    metrics_file: Optional[str] = None
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, input_path: str, output_path: str, **overrides) -> 'JobConfig':
        """
        Build a config from WORDCOUNT_* environment variables

        Args:
            input_path: Input file, directory, glob, or comma-separated list
            output_path: Output directory
            **overrides: Explicit settings; None values fall back to the environment

        Returns:
            JobConfig instance
        """
        settings = {
            'num_map_tasks': _env_int('WORDCOUNT_NUM_MAP_TASKS', 2),
            'num_reduce_tasks': _env_int('WORDCOUNT_NUM_REDUCE_TASKS', None),
            'parallelism': _env_int('WORDCOUNT_PARALLELISM', 4),
            'use_combiner': _env_bool('WORDCOUNT_USE_COMBINER', True),
            'log_level': os.environ.get('WORDCOUNT_LOG_LEVEL', 'INFO'),
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return cls(input_path=input_path, output_path=output_path, **settings)

    def validate(self):
        """Raise ValueError if any setting is out of range"""
        if not self.input_path:
            raise ValueError("Input path must not be empty")
        if not self.output_path:
            raise ValueError("Output path must not be empty")
        if self.num_map_tasks < 1:
            raise ValueError(f"num_map_tasks must be positive, got {self.num_map_tasks}")
        if self.num_reduce_tasks is not None and self.num_reduce_tasks < 1:
            raise ValueError(f"num_reduce_tasks must be positive, got {self.num_reduce_tasks}")
        if self.parallelism < 1:
            raise ValueError(f"parallelism must be positive, got {self.parallelism}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")


def setup_logging(level: str = 'INFO'):
    """Configure root logging for the driver process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
