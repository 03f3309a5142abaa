class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class InvalidRecordError(AppError):
    """Raised when a fetched schedule record cannot be turned into a domain model."""
    def __init__(self, record_type: str, record_id: object, details: dict = None):
        super().__init__(
            f"{record_type} record {record_id if record_id is not None else '<no id>'} is invalid",
            status_code=422,
            details=details,
        )
        self.record_type = record_type
        self.record_id = record_id

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)
