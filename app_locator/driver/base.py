"""
Driver protocols consumed by the scanner.

Any object with these async methods can be scanned: the Appium and CDP adapters
in this package, or a test double. Every call is a read-only round-trip and may
raise; the scanner decides which failures are fatal. Web-only drivers refuse
element queries with DriverUnavailable.
"""

from typing import Any, Protocol, TypedDict, runtime_checkable


class Point(TypedDict):
	x: int
	y: int


class Size(TypedDict):
	width: int
	height: int


@runtime_checkable
class ElementHandle(Protocol):
	async def is_displayed(self) -> bool: ...

	async def get_tag_name(self) -> str | None: ...

	async def get_text(self) -> str | None: ...

	async def get_attribute(self, name: str) -> str | None: ...

	async def is_enabled(self) -> bool: ...

	async def get_location(self) -> Point: ...

	async def get_size(self) -> Size: ...


@runtime_checkable
class Driver(Protocol):
	@property
	def has_session(self) -> bool: ...

	async def get_page_source(self) -> str: ...

	async def query_elements(self, xpath: str) -> list[ElementHandle]: ...

	async def get_window_size(self) -> Size: ...

	async def execute_script(self, script: str, *args: Any) -> Any: ...
