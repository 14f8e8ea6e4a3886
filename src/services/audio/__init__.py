"""
Audio module - Take decoding and waveform utilities.
"""

from .processor import AudioProcessor

__all__ = ["AudioProcessor"]
