from typing import Optional, Dict, Any, List


class CrawlerError(Exception):
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigError(CrawlerError):
    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.fields = fields or []
        super().__init__(
            message=message,
            error_code="INVALID_CONFIG",
            details={"fields": self.fields}
        )


class TransientNetworkError(CrawlerError):
    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__(message=message, details=details)


class ContentFetchError(TransientNetworkError):
    pass


class ValidationError(CrawlerError):
    pass


class ProviderError(CrawlerError):
    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(
            message=f"{provider}: {message}",
            error_code="PROVIDER_FAILED",
            details={"provider": provider}
        )


RETRYABLE_ERRORS = (TransientNetworkError, ValidationError)
