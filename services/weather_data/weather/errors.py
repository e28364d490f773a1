"""Errors raised on the fetch path. Anything here ends up as a 500 envelope."""


class WeatherDataError(Exception):
    """Base class for fatal weather-data failures."""


class MissingAPIKeyError(WeatherDataError):
    def __init__(self) -> None:
        super().__init__("OPENWEATHER_API_KEY is not set in environment secrets.")


class WeatherAPIError(WeatherDataError):
    """OpenWeatherMap answered with a non-success HTTP status."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Weather API error: {status_code}")
