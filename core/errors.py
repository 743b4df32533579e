# core/errors.py


class ItineraryError(Exception):
    """Base class for every error raised by the planner."""


class RequestValidationError(ItineraryError):
    """The inbound trip request cannot be turned into a TripRequest."""


class MissingField(RequestValidationError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidNumber(RequestValidationError):
    def __init__(self, field: str, value, reason: str = "must be a positive number"):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class BudgetTooLow(RequestValidationError):
    def __init__(self, budget: int, days: int, minimum: int, currency: str = "₹"):
        self.budget = budget
        self.days = days
        self.minimum = minimum
        super().__init__(
            f"Budget {currency}{budget} is too low for {days} day(s): "
            f"minimum is {currency}{minimum}"
        )


class ExternalCollaboratorUnavailable(ItineraryError):
    """A third-party call (AI, geocoding, places) failed, timed out or returned garbage."""


class SynthesisError(ItineraryError):
    """An internal invariant was violated while building the itinerary."""
