"""
Shared utilities for the analysis run.

Keep helpers here small and dependency-free.
"""

from .paths import build_output_path, result_filename

__all__ = ["build_output_path", "result_filename"]
