"""Exception types raised by the learning engine."""


class VocabError(Exception):
    """Base class for recoverable engine errors."""


class ValidationError(VocabError, ValueError):
    """Input rejected before any mutation happened."""


class ImportFormatError(VocabError, ValueError):
    """An import document could not be parsed or has the wrong shape."""


class PersistenceError(VocabError, RuntimeError):
    """Writing to or reading from the blob store failed."""


class QuizStateError(VocabError, RuntimeError):
    """A quiz operation was called in a state that does not allow it."""
