"""Error taxonomy for the oracle pipeline."""


class OracleError(Exception):
    """Base class for errors that cross the pipeline boundary."""

    status_code: int = 500

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> dict[str, str]:
        """Error body served to clients."""
        body = {"error": self.message}
        if self.hint:
            body["hint"] = self.hint
        return body


class InputError(OracleError):
    """Missing or empty query input."""

    status_code = 400


class NotFoundError(OracleError):
    """Identity resolution produced no tradable token."""

    status_code = 404


class InternalError(OracleError):
    """Unexpected failure during orchestration or scoring."""

    status_code = 500


class UpstreamDegradedError(Exception):
    """
    A single upstream call failed, timed out or returned unusable data.

    Raised by live sources and converted to a fallback value by the
    pipeline at the failing call site. Never surfaced to clients.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"[{source}] {message}")
        self.source = source
