from typing import Any, Dict, Optional


class AppException(Exception):
    """Base application exception class."""

    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent reporting."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details
            }
        }


class ModelUnavailableError(AppException):
    """Exception for model artifacts that could not be fetched or loaded."""

    def __init__(
        self,
        model_name: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize model unavailable exception.

        Args:
            model_name: Name of the model that could not be loaded
            message: Custom error message
            details: Additional error details
        """
        error_details = details or {}
        error_details["model_name"] = model_name

        super().__init__(
            message=message or f"Model '{model_name}' is unavailable",
            code="model_unavailable",
            details=error_details
        )
        self.model_name = model_name


class MetadataUnavailableError(AppException):
    """Exception for model metadata that could not be fetched or parsed."""

    def __init__(
        self,
        model_name: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        error_details["model_name"] = model_name

        super().__init__(
            message=message or f"Metadata for model '{model_name}' is unavailable",
            code="metadata_unavailable",
            details=error_details
        )
        self.model_name = model_name


class LookupFailureError(AppException):
    """Exception for external data lookups that failed."""

    def __init__(
        self,
        service_name: str,
        message: str = "External lookup failed",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize lookup failure exception.

        Args:
            service_name: Name of the external service
            message: Error message
            details: Additional error details
        """
        error_details = details or {}
        error_details["service"] = service_name

        super().__init__(
            message=message,
            code="lookup_failure",
            details=error_details
        )


class MalformedInputError(AppException):
    """Exception for input that cannot be processed."""

    def __init__(
        self,
        message: str = "Input sentence is empty",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code="malformed_input", details=details)


class IntentClassificationError(AppException):
    """Exception for turns whose intent could not be classified."""

    def __init__(
        self,
        message: str = "Intent classification failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code="intent_classification_error", details=details)
