from typing import Optional


class ApiCheckerError(Exception):
    """Base class for errors raised by the API checker."""


class ConfigError(ApiCheckerError):
    """Invalid startup configuration. Fatal before the scheduler starts."""


class EndpointError(ApiCheckerError):
    """
    Failure local to a single beacon endpoint. Never fatal to a probe run.
    """

    def __init__(self, endpoint: str, message: str):
        self.endpoint = endpoint
        self.message = message
        super().__init__(str(self))

    @property
    def detail(self) -> str:
        """The failure without the endpoint prefix."""
        return self.message

    def __str__(self) -> str:
        return f"{self.endpoint}: {self.detail}"


class TransportError(EndpointError):
    def __init__(
        self, endpoint: str, message: str, status_code: Optional[int] = None
    ):
        self.status_code = status_code
        super().__init__(endpoint, message)

    @property
    def detail(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


class DecodeError(EndpointError):
    pass
