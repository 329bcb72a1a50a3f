"""
Reduce Task Executor
Executes reduce tasks by reading intermediate data, grouping by key,
applying the reduce function, and writing a part file
"""

import os
import json
import time
import logging
from collections import defaultdict

from common.output_writer import write_partition
from worker.function_loader import FunctionLoader, collect_pairs

logger = logging.getLogger(__name__)


class ReduceExecutor:
    """Executes a single reduce task"""

    def __init__(self, task_id: int, partition_id: int, intermediate_files: list,
                 work_dir: str, job_file: str = None):
        """
        Initialize the reduce executor

        Args:
            task_id: Unique ID for this reduce task
            partition_id: Partition ID this reduce task is responsible for
            intermediate_files: List of intermediate file paths to read
            work_dir: Staging directory the part file is written to
            job_file: Path to a job file, or None for the built-in word count
        """
        self.task_id = task_id
        self.partition_id = partition_id
        self.intermediate_files = intermediate_files
        self.work_dir = work_dir
        self.loader = FunctionLoader(job_file)

    def execute(self) -> dict:
        """
        Execute the reduce task

        Returns:
            Dictionary with 'success', 'execution_time_ms', 'error_message',
            'output_file' and 'records_written' fields
        """
        start_time = time.time()

        try:
            reduce_func = self.loader.get_reduce_function()

            key_groups = self._read_and_group_intermediate()
            logger.info(f"Reduce task {self.task_id}: Grouped {len(key_groups)} unique keys")

            results = []
            for key in sorted(key_groups.keys()):  # Sort by key for deterministic output
                results.extend(collect_pairs(reduce_func, key, key_groups[key]))

            output_file = write_partition(self.work_dir, self.partition_id, results)

            execution_time = int((time.time() - start_time) * 1000)
            logger.info(f"Reduce task {self.task_id}: Wrote {len(results)} records "
                        f"to {output_file} in {execution_time}ms")

            return {
                'success': True,
                'execution_time_ms': execution_time,
                'error_message': '',
                'output_file': output_file,
                'records_written': len(results)
            }

        except Exception as e:
            execution_time = int((time.time() - start_time) * 1000)
            logger.error(f"Reduce task {self.task_id} failed: {e}")
            return {
                'success': False,
                'execution_time_ms': execution_time,
                'error_message': str(e),
                'output_file': '',
                'records_written': 0
            }

    def _read_and_group_intermediate(self) -> dict:
        """
        Read all intermediate files and group by key

        Returns:
            Dictionary mapping key (as string) to list of values
        """
        key_groups = defaultdict(list)
        files_read = 0
        lines_processed = 0
        lines_skipped = 0

        for filepath in self.intermediate_files:
            if not os.path.exists(filepath):
                logger.warning(f"Reduce task {self.task_id}: File not found: {filepath}")
                continue

            files_read += 1

            with open(filepath, 'r', encoding='utf-8', errors='ignore') as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue

                    try:
                        record = json.loads(line)
                        key_groups[str(record['key'])].append(record['value'])
                        lines_processed += 1
                    except (json.JSONDecodeError, KeyError, TypeError) as e:
                        lines_skipped += 1
                        logger.warning(f"Reduce task {self.task_id}: Skipping malformed "
                                       f"line in {filepath}: {e}")

        logger.info(f"Reduce task {self.task_id}: Read {files_read} files, processed "
                    f"{lines_processed} records, skipped {lines_skipped} malformed records")
        return key_groups
