"""
Error types shared by the planner, store, auth and pages.
"""


class FitPlannerError(Exception):
    """Base class for application errors."""


class ConfigurationError(FitPlannerError):
    """Missing or rejected credential, or unreadable configuration."""


class ValidationError(FitPlannerError):
    """Raised when a record fails boundary validation."""


class ProfileFlowError(FitPlannerError):
    """Raised when the profile form is driven out of order."""


class AuthError(FitPlannerError):
    """Authentication failure with a message suitable for the auth form."""


class PersistenceError(FitPlannerError):
    """A read or write against the workout store failed."""


class GenerationError(FitPlannerError):
    """Base class for plan generation failures."""


class GenerationFailedError(GenerationError):
    """The generation job reported failure."""


class GenerationTransportError(GenerationError):
    """The generation service could not be reached."""


class GenerationTimeoutError(GenerationError):
    """The generation job did not finish within the allowed poll attempts."""
