"""Exceptions raised by the retail sales analysis."""


class AnalysisError(Exception):
    """Base class for analysis failures."""

    def __init__(self, detail: str = "Retail sales analysis failed"):
        super().__init__(detail)
        self.detail = detail


class IngestionError(AnalysisError):
    """Source dataset could not be read or lacks required columns."""

    def __init__(self, detail: str = "Could not ingest transactions"):
        super().__init__(detail)


class RankingError(AnalysisError, ValueError):
    """Invalid ranking request (bad limit, tie policy or measure value)."""

    def __init__(self, detail: str = "Invalid ranking request"):
        super().__init__(detail)
