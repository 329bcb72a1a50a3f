"""
Map Task Executor
Executes map tasks by reading an input split, applying the map function,
partitioning output, and writing intermediate files
"""

import os
import json
import time
import zlib
import logging
from collections import defaultdict

from common.input_reader import InputSplit, read_split
from worker.function_loader import FunctionLoader, collect_pairs

logger = logging.getLogger(__name__)


def partition_for(key, num_reduce_tasks: int) -> int:
    """Stable hash partitioning, independent of PYTHONHASHSEED"""
    return zlib.crc32(str(key).encode('utf-8')) % num_reduce_tasks


def intermediate_file_name(task_id: int, partition: int) -> str:
    return f"map-{task_id}-reduce-{partition}.jsonl"


class MapExecutor:
    """Executes a single map task"""

    def __init__(self, task_id: int, split: InputSplit, num_reduce_tasks: int,
                 intermediate_dir: str, job_file: str = None, use_combiner: bool = True):
        """
        Initialize the map executor

        Args:
            task_id: Unique ID for this map task
            split: Byte range of the input this task reads
            num_reduce_tasks: Number of reduce tasks (for partitioning)
            intermediate_dir: Directory for intermediate files
            job_file: Path to a job file, or None for the built-in word count
            use_combiner: Whether to apply the combiner function
        """
        self.task_id = task_id
        self.split = split
        self.num_reduce_tasks = num_reduce_tasks
        self.intermediate_dir = intermediate_dir
        self.use_combiner = use_combiner
        self.loader = FunctionLoader(job_file)

    def execute(self) -> dict:
        """
        Execute the map task

        Returns:
            Dictionary with 'success', 'execution_time_ms', 'error_message',
            'intermediate_files', 'records_read', 'records_emitted' and
            'records_combined' (pairs written after the combiner) fields
        """
        start_time = time.time()

        try:
            map_func = self.loader.get_map_function()

            logger.info(f"Map task {self.task_id}: Reading {self.split.path} "
                        f"[{self.split.start}, {self.split.end})")
            intermediate = defaultdict(list)
            records_read = 0
            records_emitted = 0
            for line_num, line in enumerate(read_split(self.split)):
                key = f"{self.split.path}:{self.split.start}:{line_num}"
                for out_key, out_value in map_func(key, line):
                    partition = partition_for(out_key, self.num_reduce_tasks)
                    intermediate[partition].append((out_key, out_value))
                    records_emitted += 1
                records_read += 1

            logger.info(f"Map task {self.task_id}: Read {records_read} lines, "
                        f"emitted {records_emitted} pairs")

            records_combined = records_emitted
            if self.use_combiner:
                intermediate = self._apply_combiner(intermediate)
                records_combined = sum(len(v) for v in intermediate.values())
                logger.info(f"Map task {self.task_id}: After combiner: {records_combined} pairs")

            intermediate_files = self._write_intermediate_files(intermediate)

            execution_time = int((time.time() - start_time) * 1000)
            logger.info(f"Map task {self.task_id}: Completed in {execution_time}ms")

            return {
                'success': True,
                'execution_time_ms': execution_time,
                'error_message': '',
                'intermediate_files': intermediate_files,
                'records_read': records_read,
                'records_emitted': records_emitted,
                'records_combined': records_combined
            }

        except Exception as e:
            execution_time = int((time.time() - start_time) * 1000)
            logger.error(f"Map task {self.task_id} failed: {e}")
            return {
                'success': False,
                'execution_time_ms': execution_time,
                'error_message': str(e),
                'intermediate_files': {},
                'records_read': 0,
                'records_emitted': 0,
                'records_combined': 0
            }

    def _apply_combiner(self, intermediate: dict) -> dict:
        """
        Apply combiner function to local map output

        Args:
            intermediate: Dictionary mapping partition_id to list of (key, value) pairs

        Returns:
            Dictionary with same structure but with combined values
        """
        combiner_func = self.loader.get_combiner_function()
        if not combiner_func:
            return intermediate

        combined = {}
        for partition, kv_pairs in intermediate.items():
            key_groups = defaultdict(list)
            for k, v in kv_pairs:
                key_groups[k].append(v)

            combined_pairs = []
            for key, values in key_groups.items():
                combined_pairs.extend(collect_pairs(combiner_func, key, values))

            combined[partition] = combined_pairs

        return combined

    def _write_intermediate_files(self, intermediate: dict) -> dict:
        """
        Write intermediate key-value pairs to disk in JSON lines format

        Args:
            intermediate: Dictionary mapping partition_id to list of (key, value) pairs

        Returns:
            Dictionary mapping partition_id to the written file path
        """
        os.makedirs(self.intermediate_dir, exist_ok=True)

        written = {}
        for partition, kv_pairs in sorted(intermediate.items()):
            if not kv_pairs:
                continue
            filename = os.path.join(self.intermediate_dir,
                                    intermediate_file_name(self.task_id, partition))

            with open(filename, 'w', encoding='utf-8') as f:
                for key, value in kv_pairs:
                    f.write(json.dumps({'key': key, 'value': value}) + '\n')
            written[partition] = filename

        return written
