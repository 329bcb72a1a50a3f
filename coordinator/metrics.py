"""
Performance metrics collection for word count jobs.
"""

import os
import time
import json
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

import psutil

from common.output_writer import output_size_bytes


@dataclass
class JobMetrics:
    """Metrics for a single job execution."""

    job_id: str
    app_name: str
    input_path: str
    start_time: float
    end_time: float
    map_phase_start: float
    map_phase_end: float
    reduce_phase_start: float
    reduce_phase_end: float
    num_map_tasks: int
    num_reduce_tasks: int
    use_combiner: bool
    input_size_bytes: int
    intermediate_size_bytes: int = 0
    output_size_bytes: int = 0
    lines_read: int = 0
    pairs_emitted: int = 0
    pairs_after_combiner: int = 0
    combiner_reduction_ratio: float = 0.0
    output_records: int = 0
    peak_memory_bytes: int = 0
    succeeded: bool = False

    @property
    def total_time_ms(self) -> int:
        """Total job execution time in milliseconds."""
        return int((self.end_time - self.start_time) * 1000)

    @property
    def map_phase_time_seconds(self) -> float:
        return self.map_phase_end - self.map_phase_start

    @property
    def reduce_phase_time_seconds(self) -> float:
        return self.reduce_phase_end - self.reduce_phase_start

    def to_dict(self) -> dict:
        """Convert metrics to dictionary, including derived timings."""
        data = asdict(self)
        data['total_time_ms'] = self.total_time_ms
        data['map_phase_time_seconds'] = self.map_phase_time_seconds
        data['reduce_phase_time_seconds'] = self.reduce_phase_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Collects and manages metrics for jobs run in this process."""

    def __init__(self):
        self.job_metrics: Dict[str, JobMetrics] = {}
        self.process = psutil.Process()

    def _sample_memory(self, job_id: str):
        rss = self.process.memory_info().rss
        metrics = self.job_metrics[job_id]
        metrics.peak_memory_bytes = max(metrics.peak_memory_bytes, rss)

    def start_job(self, job_id: str, app_name: str, input_path: str, input_files: List[str],
                  num_map_tasks: int, num_reduce_tasks: int, use_combiner: bool):
        """Initialize metrics tracking for a new job."""
        now = time.time()
        self.job_metrics[job_id] = JobMetrics(
            job_id=job_id,
            app_name=app_name,
            input_path=input_path,
            start_time=now,
            end_time=0,
            map_phase_start=now,
            map_phase_end=0,
            reduce_phase_start=0,
            reduce_phase_end=0,
            num_map_tasks=num_map_tasks,
            num_reduce_tasks=num_reduce_tasks,
            use_combiner=use_combiner,
            input_size_bytes=sum(os.path.getsize(f) for f in input_files)
        )
        self._sample_memory(job_id)

    def end_map_phase(self, job_id: str, lines_read: int, pairs_emitted: int,
                      pairs_after_combiner: Optional[int] = None):
        """Mark the end of the map phase."""
        if job_id in self.job_metrics:
            metrics = self.job_metrics[job_id]
            metrics.map_phase_end = time.time()
            metrics.lines_read = lines_read
            metrics.pairs_emitted = pairs_emitted
            if pairs_after_combiner is None:
                pairs_after_combiner = pairs_emitted
            metrics.pairs_after_combiner = pairs_after_combiner
            # Fraction of map output pairs removed by the combiner
            if pairs_emitted > 0:
                metrics.combiner_reduction_ratio = 1.0 - (pairs_after_combiner / pairs_emitted)
            self._sample_memory(job_id)

    def start_reduce_phase(self, job_id: str, intermediate_files: List[str]):
        """Mark the start of the reduce phase and record intermediate data size."""
        if job_id in self.job_metrics:
            metrics = self.job_metrics[job_id]
            metrics.reduce_phase_start = time.time()
            metrics.intermediate_size_bytes = sum(
                os.path.getsize(f) for f in intermediate_files if os.path.exists(f))

    def end_job(self, job_id: str, output_path: Optional[str], output_records: int = 0):
        """Mark job completion and record output size; output_path is None for failed jobs."""
        if job_id in self.job_metrics:
            metrics = self.job_metrics[job_id]
            now = time.time()
            if metrics.reduce_phase_start:
                metrics.reduce_phase_end = now
            metrics.end_time = now
            metrics.output_records = output_records
            if output_path is not None:
                metrics.output_size_bytes = output_size_bytes(output_path)
                metrics.succeeded = True
            self._sample_memory(job_id)

    def get_metrics(self, job_id: str) -> Optional[JobMetrics]:
        """Retrieve metrics for a specific job."""
        return self.job_metrics.get(job_id)
