"""Coordinators layer - Application control flow."""

from vocab_master.coordinators.vocabulary_coordinator import VocabularyCoordinator
from vocab_master.coordinators.reminder_coordinator import ReminderCoordinator
from vocab_master.coordinators.study_aids_coordinator import StudyAidsCoordinator

__all__ = ["VocabularyCoordinator", "ReminderCoordinator", "StudyAidsCoordinator"]
