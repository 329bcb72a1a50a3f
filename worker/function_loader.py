"""
Function Loader for word count job functions.
Uses the built-in word count job, or loads map, reduce, and combiner
functions from a user-provided Python file
"""

import importlib.util
import os

from worker import wordcount_job


class FunctionLoader:
    """Resolves the map/reduce/combiner functions of a job"""

    def __init__(self, job_file: str = None):
        """
        Initialize the function loader

        Args:
            job_file: Path to a Python file defining map/reduce functions,
                or None for the built-in word count job
        """
        self.job_file = job_file
        self.module = None

    def load_module(self):
        """
        Load the job module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the job file doesn't exist
        """
        if self.job_file is None:
            self.module = wordcount_job
            return self.module

        if not os.path.exists(self.job_file):
            raise FileNotFoundError(f"Job file not found: {self.job_file}")

        module_name = "user_job_" + os.path.splitext(os.path.basename(self.job_file))[0]
        spec = importlib.util.spec_from_file_location(module_name, self.job_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Failed to load job file: {self.job_file}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        self.module = module
        return module

    def _require(self, name: str):
        if not self.module:
            self.load_module()

        if not hasattr(self.module, name):
            raise AttributeError(f"Job module must define '{name}'")
        return getattr(self.module, name)

    def get_map_function(self):
        """
        Get map function from the job module

        Raises:
            AttributeError: If module doesn't define 'map_function'
        """
        return self._require('map_function')

    def get_reduce_function(self):
        """
        Get reduce function from the job module

        Raises:
            AttributeError: If module doesn't define 'reduce_function'
        """
        return self._require('reduce_function')

    def get_combiner_function(self):
        """
        Get combiner function from the job module

        Returns:
            combiner_function, or reduce_function as default, or None
        """
        if not self.module:
            self.load_module()

        if hasattr(self.module, 'combiner_function'):
            return self.module.combiner_function
        # Default combiner is reduce function
        elif hasattr(self.module, 'reduce_function'):
            return self.module.reduce_function
        return None


def collect_pairs(func, key, values) -> list:
    """
    Call a reduce-style function and normalize its output to (key, value) pairs

    Reduce and combiner functions may yield pairs or return a single value;
    a single value is paired with the input key.
    """
    result = func(key, values)
    if isinstance(result, (str, bytes, int, float)) or result is None:
        return [(key, result)]
    if isinstance(result, tuple) and len(result) == 2:
        return [result]
    try:
        iterator = iter(result)
    except TypeError:
        # Not iterable, treat as a single value
        return [(key, result)]

    # Errors raised while the function body runs must reach the caller
    items = list(iterator)
    if all(isinstance(item, tuple) and len(item) == 2 for item in items):
        return items
    return [(key, items)]
