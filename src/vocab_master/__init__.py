"""
Vocab Master - An English-Turkish vocabulary trainer.

This package provides the learning engine behind the app:
- Word collection with categories and levels
- Spaced-repetition review scheduling
- Quizzes in four question modes
- Streaks, statistics and JSON backup/import
"""

__version__ = "0.1.0"

# Make key components available at package level
from vocab_master.core import AppState, Word, WordStats
from vocab_master.io import StateRepository

__all__ = [
    "AppState",
    "Word",
    "WordStats",
    "StateRepository",
]
