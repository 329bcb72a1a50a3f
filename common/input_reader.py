"""
Input Reader
Resolves input paths, plans byte-range splits, and streams the lines of a split
"""

import os
import glob
import gzip
import logging
from dataclasses import dataclass
from typing import Iterator, List

logger = logging.getLogger(__name__)

# A file tail up to 10% over the goal size stays in the last split
SPLIT_SLOP = 1.1


@dataclass(frozen=True)
class InputSplit:
    """A byte range [start, end) of one input file"""
    path: str
    start: int
    end: int
    compressed: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start


def _is_hidden(name: str) -> bool:
    return name.startswith('.') or name.startswith('_')


def _has_glob(pattern: str) -> bool:
    return any(c in pattern for c in '*?[')


def _list_directory(directory: str) -> List[str]:
    """Direct, non-hidden files of a directory"""
    files = []
    for name in os.listdir(directory):
        if _is_hidden(name):
            continue
        full_path = os.path.join(directory, name)
        if os.path.isfile(full_path):
            files.append(full_path)
    return files


def resolve_input_paths(input_path: str) -> List[str]:
    """
    Expand an input path into the list of files to read

    Args:
        input_path: File, directory, or glob pattern; several may be comma-separated

    Returns:
        Sorted list of file paths without duplicates

    Raises:
        FileNotFoundError: If a path does not exist or a pattern matches nothing
    """
    files = set()

    for entry in input_path.split(','):
        entry = entry.strip()
        if not entry:
            continue

        if _has_glob(entry):
            matches = glob.glob(entry)
            if not matches:
                raise FileNotFoundError(f"Input pattern {entry} matches 0 files")
            for match in matches:
                if os.path.isdir(match):
                    files.update(_list_directory(match))
                elif not _is_hidden(os.path.basename(match)):
                    files.add(match)
        elif os.path.isdir(entry):
            files.update(_list_directory(entry))
        elif os.path.isfile(entry):
            files.add(entry)
        else:
            raise FileNotFoundError(f"Input path does not exist: {entry}")

    return sorted(files)


def compute_splits(paths: List[str], num_splits: int) -> List[InputSplit]:
    """
    Cut input files into roughly num_splits byte ranges

    Args:
        paths: Files to split
        num_splits: Desired number of splits across all files

    Returns:
        List of InputSplit in file order
    """
    sizes = {path: os.path.getsize(path) for path in paths}
    total_size = sum(sizes.values())
    # Round the goal up so a file never yields more than num_splits ranges
    goal_size = max(-(-total_size // max(num_splits, 1)), 1)

    splits = []
    for path in paths:
        size = sizes[path]
        if size == 0:
            continue

        # Gzip streams can only be read from the beginning
        if path.endswith('.gz'):
            splits.append(InputSplit(path, 0, size, compressed=True))
            continue

        start = 0
        while (size - start) / goal_size > SPLIT_SLOP:
            splits.append(InputSplit(path, start, start + goal_size))
            start += goal_size
        splits.append(InputSplit(path, start, size))

    logger.debug(f"Planned {len(splits)} splits over {len(paths)} files ({total_size} bytes)")
    return splits


def _decode(raw: bytes) -> str:
    return raw.decode('utf-8', errors='ignore').rstrip('\r\n')


def read_split(split: InputSplit) -> Iterator[str]:
    """
    Yield the lines that start inside the split

    Args:
        split: InputSplit to read

    Yields:
        Lines without their line terminator
    """
    if split.compressed:
        with gzip.open(split.path, 'rb') as f:
            for raw in f:
                yield _decode(raw)
        return

    with open(split.path, 'rb') as f:
        if split.start > 0:
            # The line holding byte start-1 belongs to the previous split
            f.seek(split.start - 1)
            f.readline()

        while f.tell() < split.end:
            raw = f.readline()
            if not raw:
                break
            yield _decode(raw)
