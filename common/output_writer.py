"""
Output Writer
Writes reduce results as part files and commits the output directory
"""

import os
import glob
import shutil
import logging
from typing import Dict, Iterable, Tuple

logger = logging.getLogger(__name__)

TEMPORARY_DIR = '_temporary'
SUCCESS_MARKER = '_SUCCESS'


def work_dir_for(output_path: str) -> str:
    """Directory where a job stages its files before commit"""
    return os.path.join(output_path, TEMPORARY_DIR)


def part_file_name(partition_id: int) -> str:
    return f"part-{partition_id:05d}"


def format_record(key, value) -> str:
    """Render one output record as '(key,value)'"""
    return f"({key},{value})"


def parse_record(line: str) -> Tuple[str, int]:
    """
    Parse a '(key,value)' line written by format_record

    Raises:
        ValueError: If the line is not a record
    """
    line = line.strip()
    if not (line.startswith('(') and line.endswith(')')):
        raise ValueError(f"Malformed output record: {line!r}")
    key, sep, value = line[1:-1].rpartition(',')
    if not sep:
        raise ValueError(f"Malformed output record: {line!r}")
    return key, int(value)


def prepare_output_dir(output_path: str, overwrite: bool = False) -> str:
    """
    Create the output directory and its staging area

    Args:
        output_path: Output directory
        overwrite: Remove an existing output directory instead of failing

    Returns:
        Path of the staging directory

    Raises:
        FileExistsError: If output_path exists and overwrite is False
    """
    if os.path.exists(output_path):
        if not overwrite:
            raise FileExistsError(f"Output directory {output_path} already exists")
        logger.info(f"Removing existing output directory {output_path}")
        if os.path.isdir(output_path):
            shutil.rmtree(output_path)
        else:
            os.remove(output_path)

    work_dir = work_dir_for(output_path)
    os.makedirs(work_dir)
    return work_dir


def write_partition(work_dir: str, partition_id: int, records: Iterable[Tuple]) -> str:
    """
    Write one reduce task's records

    Args:
        work_dir: Staging directory
        partition_id: Partition the records belong to
        records: (key, value) pairs

    Returns:
        Path of the written part file
    """
    os.makedirs(work_dir, exist_ok=True)
    output_file = os.path.join(work_dir, part_file_name(partition_id))

    with open(output_file, 'w', encoding='utf-8') as f:
        for key, value in records:
            f.write(format_record(key, value) + '\n')

    return output_file


def commit_output(output_path: str):
    """Move staged part files into place and mark the output complete"""
    work_dir = work_dir_for(output_path)
    for part_file in sorted(glob.glob(os.path.join(work_dir, 'part-*'))):
        os.replace(part_file, os.path.join(output_path, os.path.basename(part_file)))

    shutil.rmtree(work_dir, ignore_errors=True)

    with open(os.path.join(output_path, SUCCESS_MARKER), 'w'):
        pass
    logger.info(f"Committed output to {output_path}")


def abort_output(output_path: str):
    """Drop staged files after a failed job"""
    shutil.rmtree(work_dir_for(output_path), ignore_errors=True)
    logger.warning(f"Aborted output in {output_path}")


def output_size_bytes(output_path: str) -> int:
    return sum(os.path.getsize(f) for f in glob.glob(os.path.join(output_path, 'part-*')))


def read_output(output_path: str) -> Dict[str, int]:
    """
    Read a committed output directory back into a mapping

    Raises:
        FileNotFoundError: If the directory has no _SUCCESS marker
    """
    if not os.path.exists(os.path.join(output_path, SUCCESS_MARKER)):
        raise FileNotFoundError(f"No completed output in {output_path}")

    counts = {}
    for part_file in sorted(glob.glob(os.path.join(output_path, 'part-*'))):
        with open(part_file, 'r', encoding='utf-8') as f:
            for line in f:
                if not line.strip():
                    continue
                key, value = parse_record(line)
                counts[key] = counts.get(key, 0) + value
    return counts
