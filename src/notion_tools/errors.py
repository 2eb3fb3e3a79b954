"""Exception hierarchy for notion-tools.

Every error is fatal to a run: library code raises, the CLI reports the
message on stderr and exits non-zero.
"""


class NotionToolsError(Exception):
    """Base class for all errors raised by notion-tools."""


class ConfigError(NotionToolsError):
    """Missing or invalid configuration (token, property name, identifiers)."""


class TransportError(NotionToolsError):
    """The request never produced an HTTP response (timeout, connection error)."""

    def __init__(self, method: str, path: str, reason: str) -> None:
        self.method = method
        self.path = path
        self.reason = reason
        super().__init__(f"notion API {method} {path}: {reason}")


class NotionAPIError(NotionToolsError):
    """Notion answered with a non-2xx status."""

    def __init__(self, method: str, path: str, status: int, body: str) -> None:
        self.method = method
        self.path = path
        self.status = status
        self.body = body
        super().__init__(f"notion API {method} {path} failed: status={status} body={body.strip()}")


class ResponseDecodeError(NotionToolsError):
    """A 2xx response body could not be decoded into the expected shape."""


class PropertyNotFoundError(NotionToolsError):
    """A returned page lacks the configured property."""

    def __init__(self, property_name: str, page_id: str) -> None:
        self.property_name = property_name
        self.page_id = page_id
        super().__init__(
            f"property {property_name!r} not found on page {page_id}; "
            "check the exact column name in Notion"
        )
