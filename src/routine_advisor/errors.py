"""Exception hierarchy for routine-advisor.

Library code raises these; the chat orchestrator converts endpoint and
response-shape failures into user-visible bubbles, and the CLI converts
everything else into an error message and a non-zero exit.
"""


class AdvisorError(Exception):
    """Base class for all routine-advisor errors."""


class CatalogError(AdvisorError):
    """The catalog document is missing or malformed."""


class StorageError(AdvisorError):
    """The local key-value store could not be read or written."""


class UnknownProductError(AdvisorError):
    """A product id is not present in the loaded catalog."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Unknown product id: {product_id}")
        self.product_id = product_id


class EndpointError(AdvisorError):
    """The chat endpoint failed (transport exception or non-success status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(AdvisorError):
    """The chat endpoint answered, but without the expected reply field."""


class AdvisorBusyError(AdvisorError):
    """A request is already in flight for this advisor."""
