class PipelineError(Exception):
    """Base for failures that end a receipt request with an error response."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers or {}


class ClientInputError(PipelineError):
    """Bad method, body, content type or missing attachment. Never retried."""

    status_code = 400


class ConfigurationError(PipelineError):
    """Missing credential or endpoint. Reported per request, the process keeps running."""

    status_code = 500


class UpstreamError(PipelineError):
    """The model endpoint answered with a non-success status, which is forwarded."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code=status_code)


class TransportError(PipelineError):
    """Network or IO failure while reading the request or reaching the endpoint."""

    status_code = 500
