#!/usr/bin/env python3
"""
Generate benchmark input files by replicating a source text to different sizes.
"""

import sys
import argparse
from pathlib import Path

# Configuration
INPUT_DIR = Path("shared") / "input"

# Target sizes (approximate)
TARGETS = [
    ("story_sm.txt", 4 * 1024),                 # ~4KB
    ("story_medium.txt", 981 * 1024),           # ~1MB
    ("story_large.txt", 9.6 * 1024 * 1024),     # ~10MB
]


def generate_file(output_path: Path, target_size: int, source_content: bytes) -> int:
    """
    Generate a file by replicating source content until target size is reached.

    Args:
        output_path: Path where the output file should be written
        target_size: Target file size in bytes
        source_content: The content to replicate

    Returns:
        Actual size of the written file
    """
    if not source_content:
        raise ValueError("Source file is empty!")

    source_size = len(source_content)
    replications = int(target_size / source_size)

    with open(output_path, 'wb') as f:
        for _ in range(replications):
            f.write(source_content)

        # Partial replication to reach the target size
        remaining = int(target_size - (replications * source_size))
        if remaining > 0:
            f.write(source_content[:remaining])

    actual_size = output_path.stat().st_size
    print(f"  ✓ Created: {output_path.name} ({actual_size / (1024*1024):.2f} MB, "
          f"{replications} replications)")
    return actual_size


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate benchmark inputs from a source text")
    parser.add_argument("source", help="Text file to replicate")
    parser.add_argument("--output-dir", default=str(INPUT_DIR), help="Where to write the inputs")
    parser.add_argument("--force", action="store_true", help="Regenerate files that already exist")
    args = parser.parse_args(argv)

    source_file = Path(args.source)
    if not source_file.exists():
        print(f"❌ Source file not found: {source_file}")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    source_content = source_file.read_bytes()

    for filename, target_size in TARGETS:
        output_path = output_dir / filename

        # Skip files already within 10% of the target
        if output_path.exists() and not args.force:
            existing_size = output_path.stat().st_size
            if abs(existing_size - target_size) < target_size * 0.1:
                print(f"  ⏭️  Skipping {filename} (already exists)")
                continue

        try:
            generate_file(output_path, target_size, source_content)
        except ValueError as e:
            print(f"  ❌ Error generating {filename}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
