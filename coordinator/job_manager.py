"""
Job Manager for the word count engine
Handles job state, task generation, phase execution, and progress tracking
"""

import os
import time
import uuid
import logging
import threading
from enum import Enum
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Optional

from common.config import JobConfig
from common.input_reader import InputSplit, resolve_input_paths, compute_splits
from common.output_writer import prepare_output_dir, commit_output, abort_output
from coordinator.metrics import MetricsCollector
from worker.map_executor import MapExecutor
from worker.reduce_executor import ReduceExecutor

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Status of a job"""
    PENDING = "pending"
    MAP_PHASE = "map_phase"
    SHUFFLE_PHASE = "shuffle_phase"
    REDUCE_PHASE = "reduce_phase"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskStatus(Enum):
    """Status of individual map or reduce tasks"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class MapTask:
    """Represents a single map task"""
    task_id: int
    split: InputSplit
    status: TaskStatus = TaskStatus.PENDING


@dataclass
class ReduceTask:
    """Represents a single reduce task"""
    task_id: int
    partition_id: int
    intermediate_files: List[str] = field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING


@dataclass
class Job:
    """Represents a complete word count job"""
    job_id: str
    config: JobConfig
    input_files: List[str] = field(default_factory=list)
    status: JobStatus = JobStatus.PENDING
    map_tasks: List[MapTask] = field(default_factory=list)
    reduce_tasks: List[ReduceTask] = field(default_factory=list)
    start_time: float = 0.0
    end_time: float = 0.0
    error_message: str = ''

    @property
    def num_reduce_tasks(self) -> int:
        if self.config.num_reduce_tasks:
            return self.config.num_reduce_tasks
        return max(len(self.map_tasks), 1)


class JobManager:
    """Runs jobs in-process and tracks their lifecycle"""

    def __init__(self):
        self.jobs: Dict[str, Job] = {}
        self.lock = threading.Lock()
        self.metrics = MetricsCollector()

    def create_job(self, config: JobConfig) -> Job:
        """Create a new job from a validated config"""
        config.validate()
        job_id = config.job_id or f"job_{uuid.uuid4().hex[:8]}"
        with self.lock:
            if job_id in self.jobs:
                raise ValueError(f"Job {job_id} already exists")
            job = Job(job_id=job_id, config=config, start_time=time.time())
            self.jobs[job_id] = job
            return job

    def generate_map_tasks(self, job: Job) -> List[MapTask]:
        """Split the job's input files into map tasks"""
        job.input_files = resolve_input_paths(job.config.input_path)
        splits = compute_splits(job.input_files, job.config.num_map_tasks)
        job.map_tasks = [MapTask(task_id=i, split=split) for i, split in enumerate(splits)]
        return job.map_tasks

    def generate_reduce_tasks(self, job: Job, intermediate_files: Dict[int, List[str]]) -> List[ReduceTask]:
        """Create one reduce task per partition with its intermediate files"""
        job.reduce_tasks = [
            ReduceTask(
                task_id=partition_id,
                partition_id=partition_id,
                intermediate_files=sorted(intermediate_files.get(partition_id, []))
            )
            for partition_id in range(job.num_reduce_tasks)
        ]
        return job.reduce_tasks

    def _set_task_status(self, task, status: TaskStatus):
        with self.lock:
            task.status = status

    def _run_map_task(self, job: Job, task: MapTask, intermediate_dir: str) -> dict:
        self._set_task_status(task, TaskStatus.RUNNING)
        result = MapExecutor(
            task_id=task.task_id,
            split=task.split,
            num_reduce_tasks=job.num_reduce_tasks,
            intermediate_dir=intermediate_dir,
            job_file=job.config.job_file,
            use_combiner=job.config.use_combiner
        ).execute()
        self._set_task_status(task, TaskStatus.COMPLETED if result['success'] else TaskStatus.FAILED)
        return result

    def _run_reduce_task(self, job: Job, task: ReduceTask, work_dir: str) -> dict:
        self._set_task_status(task, TaskStatus.RUNNING)
        result = ReduceExecutor(
            task_id=task.task_id,
            partition_id=task.partition_id,
            intermediate_files=task.intermediate_files,
            work_dir=work_dir,
            job_file=job.config.job_file
        ).execute()
        self._set_task_status(task, TaskStatus.COMPLETED if result['success'] else TaskStatus.FAILED)
        return result

    def _set_job_status(self, job: Job, status: JobStatus):
        with self.lock:
            job.status = status
            if status == JobStatus.COMPLETED:
                job.end_time = time.time()

    def _fail_job(self, job: Job, message: str):
        with self.lock:
            job.status = JobStatus.FAILED
            job.error_message = message
            job.end_time = time.time()
        abort_output(job.config.output_path)
        self.metrics.end_job(job.job_id, None)
        logger.error(f"Job {job.job_id} failed: {message}")
        raise RuntimeError(message)

    def run_job(self, config: JobConfig) -> Job:
        """
        Run a job through the map, shuffle, and reduce phases

        Args:
            config: Job settings

        Returns:
            The completed Job

        Raises:
            FileNotFoundError: If the input path cannot be resolved
            FileExistsError: If the output directory already exists
            RuntimeError: If any task fails
        """
        job = self.create_job(config)
        try:
            self.generate_map_tasks(job)
            work_dir = prepare_output_dir(config.output_path, overwrite=config.overwrite)
        except OSError as e:
            with self.lock:
                job.status = JobStatus.FAILED
                job.error_message = str(e)
                job.end_time = time.time()
            raise
        intermediate_dir = os.path.join(work_dir, 'intermediate')

        logger.info(f"Job {job.job_id} ({config.app_name}): {len(job.input_files)} input files, "
                    f"{len(job.map_tasks)} map tasks, {job.num_reduce_tasks} reduce tasks")
        self.metrics.start_job(job.job_id, config.app_name, config.input_path, job.input_files,
                               len(job.map_tasks), job.num_reduce_tasks, config.use_combiner)

        try:
            reduce_results = self._run_phases(job, work_dir, intermediate_dir)
            commit_output(config.output_path)
        except RuntimeError as e:
            self._fail_job(job, str(e))
        except Exception as e:
            self._fail_job(job, f"{type(e).__name__}: {e}")

        self._set_job_status(job, JobStatus.COMPLETED)
        self.metrics.end_job(job.job_id, config.output_path,
                             sum(r['records_written'] for r in reduce_results))

        if config.metrics_file:
            self.metrics.get_metrics(job.job_id).save_to_file(config.metrics_file)

        logger.info(f"Job {job.job_id} completed in {int((job.end_time - job.start_time) * 1000)}ms")
        return job

    def _run_phases(self, job: Job, work_dir: str, intermediate_dir: str) -> List[dict]:
        """Run the map, shuffle, and reduce phases and return the reduce results"""
        with ThreadPoolExecutor(max_workers=job.config.parallelism) as executor:
            # Map phase
            self._set_job_status(job, JobStatus.MAP_PHASE)
            map_results = list(executor.map(
                lambda task: self._run_map_task(job, task, intermediate_dir), job.map_tasks))

            for task, result in zip(job.map_tasks, map_results):
                if not result['success']:
                    raise RuntimeError(f"Map task {task.task_id} failed: {result['error_message']}")

            self.metrics.end_map_phase(job.job_id,
                                       sum(r['records_read'] for r in map_results),
                                       sum(r['records_emitted'] for r in map_results),
                                       sum(r['records_combined'] for r in map_results))

            # Shuffle phase: route intermediate files to their partitions
            self._set_job_status(job, JobStatus.SHUFFLE_PHASE)
            by_partition: Dict[int, List[str]] = {}
            for result in map_results:
                for partition, path in result['intermediate_files'].items():
                    by_partition.setdefault(partition, []).append(path)
            self.generate_reduce_tasks(job, by_partition)
            self.metrics.start_reduce_phase(
                job.job_id, [p for paths in by_partition.values() for p in paths])

            # Reduce phase
            self._set_job_status(job, JobStatus.REDUCE_PHASE)
            reduce_results = list(executor.map(
                lambda task: self._run_reduce_task(job, task, work_dir), job.reduce_tasks))

            for task, result in zip(job.reduce_tasks, reduce_results):
                if not result['success']:
                    raise RuntimeError(f"Reduce task {task.task_id} failed: {result['error_message']}")

        return reduce_results

    def get_job_status(self, job_id: str) -> Optional[Dict]:
        """Get current job status with progress"""
        with self.lock:
            job = self.jobs.get(job_id)
            if not job:
                return None

            map_completed = sum(1 for t in job.map_tasks if t.status == TaskStatus.COMPLETED)
            reduce_completed = sum(1 for t in job.reduce_tasks if t.status == TaskStatus.COMPLETED)
            total_tasks = len(job.map_tasks) + len(job.reduce_tasks)
            completed_tasks = map_completed + reduce_completed

            if job.status == JobStatus.COMPLETED:
                progress = 100
            else:
                progress = int((completed_tasks / total_tasks * 100)) if total_tasks > 0 else 0

            return {
                'status': job.status.value,
                'progress': progress,
                'map_completed': map_completed,
                'map_total': len(job.map_tasks),
                'reduce_completed': reduce_completed,
                'reduce_total': len(job.reduce_tasks),
                'error_message': job.error_message
            }
