"""
Exception types raised by the directory pipeline and the webhook forwarder.

Row-level problems never raise: they are either defaulted (bad dates) or
recorded as rejections. Everything here is fatal for the run or request.
"""


class DirectoryEtlError(Exception):
    """Base class for all project errors."""


class SourceReadError(DirectoryEtlError):
    """The source table could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read source '{path}': {reason}")


class OutputWriteError(DirectoryEtlError):
    """An output destination could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write output '{path}': {reason}")


class CategoryTableError(DirectoryEtlError):
    """The slug→label classification table is missing or invalid."""


class IntegrityError(DirectoryEtlError):
    """A link row references a business or category that is not in the output."""


class WebhookPayloadError(DirectoryEtlError):
    """The webhook body is not a usable Ghost post payload."""


class SupabaseError(DirectoryEtlError):
    """The Supabase REST API rejected a request."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Failed to insert/update article (HTTP {status}): {body}")
