"""Input/output layer for staffing datasets.

Public API:
    load_dataset(directory)        -- read CSV dataset dir -> StaffingState
    write_dataset(state, dir)      -- write StaffingState -> CSV dataset dir
    MOCK_DATASET_DIR               -- bundled mock dataset
"""

from .reader import MOCK_DATASET_DIR, load_dataset
from .writer import write_dataset

__all__ = [
    "MOCK_DATASET_DIR",
    "load_dataset",
    "write_dataset",
]
