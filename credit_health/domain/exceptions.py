"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PlanGenerationError(DomainException):
    """Improvement plan could not be produced"""

    pass


class ExternalServiceError(PlanGenerationError):
    """Text generation service is unreachable, timed out or returned an error"""

    pass


class PlanParseError(PlanGenerationError):
    """Text generation service responded but the content is not a valid plan"""

    pass


class AggregationAPIError(DomainException):
    """Account aggregation provider returned an error or is unavailable"""

    pass


class RateLimitedError(DomainException):
    """Account refresh denied while the user's cooldown window is active"""

    def __init__(self, user_id: str, remaining_minutes: int):
        self.user_id = user_id
        self.remaining_minutes = remaining_minutes
        super().__init__(
            f"Account refresh available in {remaining_minutes} minute(s)"
        )
