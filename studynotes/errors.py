class StudyNotesError(RuntimeError):
    """Base error for summary, extraction and fact-check failures."""


class ExtractionError(StudyNotesError):
    pass


class SummaryError(StudyNotesError):
    pass


class ClaimExtractionError(StudyNotesError):
    pass


class VerificationError(StudyNotesError):
    pass


class FactCheckError(StudyNotesError):
    pass
