"""
Dataset module - File system layout for collected recordings.
"""

from src.services.dataset.assets import load_lines
from src.services.dataset.writer import DatasetWriter, IngestResult

__all__ = ["DatasetWriter", "IngestResult", "load_lines"]
