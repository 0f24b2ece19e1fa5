from __future__ import annotations


class WeatherServiceError(Exception):
    """Domain error whose message is safe to show to the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LocationNotFoundError(WeatherServiceError):
    pass


class UpstreamServiceError(WeatherServiceError):
    pass


class QueryValidationError(WeatherServiceError):
    pass


class QueryRejectedError(WeatherServiceError):
    pass
