"""Exception hierarchy shared across ingestion, analysis and prediction."""

from typing import Optional, Sequence


class PredictGenieError(Exception):
    """Base class for all PredictGenie errors."""

    pass


class CsvValidationError(PredictGenieError, ValueError):
    """Raised when an uploaded CSV file is rejected.

    ``row`` is the 1-based physical row (header is row 1), or None when the
    failure concerns the file as a whole.
    """

    def __init__(self, message: str, row: Optional[int] = None):
        super().__init__(message)
        self.row = row


class CollaboratorError(PredictGenieError, RuntimeError):
    """Raised when an external collaborator (AI or prediction service) fails."""

    pass


class AnalysisError(CollaboratorError):
    """Raised when the AI analysis of a product fails."""

    pass


class PredictionError(CollaboratorError):
    """Raised when the price prediction service fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def model_not_trained(self) -> bool:
        """True when the service reports that its model has not been trained yet."""
        return "not trained" in str(self).lower()


class BatchAnalysisError(PredictGenieError):
    """Raised when every product of a batch failed its AI analysis."""

    def __init__(self, failed_products: Sequence[str]):
        self.failed_products = list(failed_products)
        failed_list = ", ".join(self.failed_products)
        super().__init__(
            "All product analyses failed. The following products could not be "
            f"analyzed: {failed_list}. Please check the logs for more details."
        )
