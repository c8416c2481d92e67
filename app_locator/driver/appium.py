"""Async adapter over an already started Appium-Python-Client session."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from appium.webdriver.common.appiumby import AppiumBy

from app_locator.driver.base import Point, Size
from app_locator.exceptions import DriverUnavailable

if TYPE_CHECKING:
	from appium.webdriver.webdriver import WebDriver
	from appium.webdriver.webelement import WebElement

logger = logging.getLogger(__name__)


class AppiumElement:
	"""Wraps a WebElement; every blocking call runs in a worker thread."""

	def __init__(self, element: 'WebElement'):
		self._element = element

	async def is_displayed(self) -> bool:
		return await asyncio.to_thread(self._element.is_displayed)

	async def get_tag_name(self) -> str | None:
		return await asyncio.to_thread(lambda: self._element.tag_name)

	async def get_text(self) -> str | None:
		return await asyncio.to_thread(lambda: self._element.text)

	async def get_attribute(self, name: str) -> str | None:
		value = await asyncio.to_thread(self._element.get_attribute, name)
		return None if value is None else str(value)

	async def is_enabled(self) -> bool:
		return await asyncio.to_thread(self._element.is_enabled)

	async def get_location(self) -> Point:
		location = await asyncio.to_thread(lambda: self._element.location)
		return {'x': int(location['x']), 'y': int(location['y'])}

	async def get_size(self) -> Size:
		size = await asyncio.to_thread(lambda: self._element.size)
		return {'width': int(size['width']), 'height': int(size['height'])}


class AppiumDriver:
	"""
	Read-only view of an Appium session for the scanner.

	The session itself is created and closed by the caller; this adapter only queries it.
	"""

	def __init__(self, driver: 'WebDriver | None'):
		self._driver = driver

	@property
	def has_session(self) -> bool:
		return self._driver is not None and bool(getattr(self._driver, 'session_id', None))

	def _require_driver(self) -> 'WebDriver':
		if not self.has_session:
			raise DriverUnavailable('No active Appium session')
		assert self._driver is not None
		return self._driver

	async def get_page_source(self) -> str:
		driver = self._require_driver()
		return await asyncio.to_thread(lambda: driver.page_source)

	async def query_elements(self, xpath: str) -> list[AppiumElement]:
		driver = self._require_driver()
		elements = await asyncio.to_thread(driver.find_elements, AppiumBy.XPATH, xpath)
		logger.debug(f'🔎 XPath query matched {len(elements)} elements')
		return [AppiumElement(element) for element in elements]

	async def get_window_size(self) -> Size:
		driver = self._require_driver()
		size = await asyncio.to_thread(driver.get_window_size)
		return {'width': int(size['width']), 'height': int(size['height'])}

	async def execute_script(self, script: str, *args: Any) -> Any:
		driver = self._require_driver()
		return await asyncio.to_thread(driver.execute_script, script, *args)
