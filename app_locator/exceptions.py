class AppLocatorError(Exception):
	"""Base class for every error raised by app_locator."""


class DocumentParseFailure(AppLocatorError):
	"""The page source is not well-formed markup, so no snapshot is available."""

	def __init__(self, message: str, source_excerpt: str | None = None):
		super().__init__(message)
		self.message = message
		self.source_excerpt = source_excerpt


class DriverUnavailable(AppLocatorError):
	"""No usable driver session; the whole scan is aborted."""


class FetchError(AppLocatorError):
	"""A single attribute fetch against a live element failed."""

	def __init__(self, field: str, cause: BaseException | None = None):
		super().__init__(f'Failed to fetch {field}: {cause!r}' if cause else f'Failed to fetch {field}')
		self.field = field
		self.cause = cause


class ElementFaultIsolated(AppLocatorError):
	"""An element could not be processed. Contained inside the scan, never surfaced to callers."""
