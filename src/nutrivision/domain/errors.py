"""Error kinds raised by the analysis pipeline."""


class NutriVisionError(Exception):
    """Base class for application errors."""


class MalformedAIResponseError(NutriVisionError):
    """The model returned text that is not the expected JSON shape."""


class ServiceFailureError(NutriVisionError):
    """The call to the model service itself failed."""


class ValidationFailureError(NutriVisionError):
    """User input was rejected before any service call."""


class PersistenceFailureError(NutriVisionError):
    """Reading or writing local state failed."""


class AnalysisInProgressError(NutriVisionError):
    """An analysis or disambiguation is already outstanding."""


class AnalysisFailedError(NutriVisionError):
    """A pipeline stage failed; the message is safe to show to the user."""

    def __init__(self, message: str, stage: str) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage


class NothingPendingError(NutriVisionError):
    """A confirmation was submitted with no disambiguation pending."""
