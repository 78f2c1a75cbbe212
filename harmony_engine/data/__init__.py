"""
Data Subpackage

This package handles the curated progression dataset:
    - schema.py: Pydantic models defining a progression record
    - dataset.py: Functions to load and save the YAML dataset
    - progressions.yaml: The dataset itself (Roman numerals per mode)
"""

from harmony_engine.data.schema import Progression, TransposedProgression
from harmony_engine.data.dataset import load_progressions, save_progressions
