"""Shared fixtures: page sources and an in-memory driver that answers XPath queries against them."""

import os

os.environ.setdefault('APP_LOCATOR_SETUP_LOGGING', 'false')

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from lxml import etree  # noqa: E402

from app_locator.locators.bounds import parse_android_bounds, parse_ios_bounds  # noqa: E402


class StaleElementError(Exception):
	pass


class FakeElement:
	"""Element handle backed by an lxml element of the page source."""

	def __init__(self, element: etree._Element, platform: str, failing: set[str] | None = None):
		self.element = element
		self.platform = platform
		self.failing = failing or set()
		self.calls: list[str] = []

	def _check(self, operation: str) -> None:
		self.calls.append(operation)
		if operation in self.failing or '*' in self.failing:
			raise StaleElementError(f'{operation} failed: stale element reference')

	async def is_displayed(self) -> bool:
		self._check('is_displayed')
		flag = self.element.get('displayed' if self.platform == 'android' else 'visible')
		return flag != 'false'

	async def get_tag_name(self) -> str | None:
		self._check('get_tag_name')
		return self.element.tag

	async def get_text(self) -> str | None:
		self._check('get_text')
		return self.element.get('text' if self.platform == 'android' else 'label')

	async def get_attribute(self, name: str) -> str | None:
		self._check(f'get_attribute:{name}')
		return self.element.get(name)

	async def is_enabled(self) -> bool:
		self._check('is_enabled')
		return self.element.get('enabled') != 'false'

	def _bounds(self):
		if self.platform == 'android':
			return parse_android_bounds(self.element.get('bounds'))
		return parse_ios_bounds(dict(self.element.attrib))

	async def get_location(self) -> dict[str, int]:
		self._check('get_location')
		bounds = self._bounds()
		return {'x': bounds.x, 'y': bounds.y}

	async def get_size(self) -> dict[str, int]:
		self._check('get_size')
		bounds = self._bounds()
		return {'width': bounds.width, 'height': bounds.height}


class FakeDriver:
	"""Driver double: page source plus real XPath evaluation through lxml."""

	def __init__(
		self,
		page_source: str,
		platform: str = 'android',
		window_size: dict[str, int] | None = None,
		failing_elements: dict[int, set[str]] | None = None,
		script_result: Any = None,
		has_session: bool = True,
	):
		self.page_source = page_source
		self.platform = platform
		self.window_size = window_size
		self.failing_elements = failing_elements or {}
		self.script_result = script_result
		self._has_session = has_session
		self.queries: list[str] = []

	@property
	def has_session(self) -> bool:
		return self._has_session

	async def get_page_source(self) -> str:
		return self.page_source

	async def query_elements(self, xpath: str) -> list[FakeElement]:
		self.queries.append(xpath)
		root = etree.fromstring(self.page_source.encode('utf-8'))
		return [
			FakeElement(element, self.platform, self.failing_elements.get(index))
			for index, element in enumerate(root.xpath(xpath))
		]

	async def get_window_size(self) -> dict[str, int]:
		if self.window_size is None:
			raise RuntimeError('getWindowSize is not supported')
		return self.window_size

	async def execute_script(self, script: str, *args: Any) -> Any:
		return self.script_result


ANDROID_SOURCE = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<hierarchy index="0" class="hierarchy" rotation="0" width="1080" height="2400">
  <android.widget.FrameLayout index="0" package="com.example" class="android.widget.FrameLayout" text="" resource-id="" clickable="false" bounds="[0,0][1080,2400]" displayed="true">
    <android.widget.LinearLayout index="0" package="com.example" class="android.widget.LinearLayout" text="" resource-id="com.example:id/content" clickable="false" bounds="[0,63][1080,2400]" displayed="true">
      <android.widget.TextView index="0" package="com.example" class="android.widget.TextView" text="Welcome back" resource-id="com.example:id/title" clickable="false" bounds="[42,100][1038,180]" displayed="true" />
      <android.widget.EditText index="1" package="com.example" class="android.widget.EditText" text="" resource-id="com.example:id/username" clickable="true" focusable="true" bounds="[42,200][1038,320]" displayed="true" />
      <android.widget.Button index="2" package="com.example" class="android.widget.Button" text="Sign in" resource-id="com.example:id/login" content-desc="Sign in button" clickable="true" bounds="[42,360][1038,480]" displayed="true" />
      <android.widget.Button index="3" package="com.example" class="android.widget.Button" text="Forgot password" resource-id="" clickable="true" bounds="[42,2500][1038,2620]" displayed="true" />
      <android.widget.ImageView index="4" package="com.example" class="android.widget.ImageView" text="" resource-id="" content-desc="null" clickable="false" bounds="[0,0][10,10]" displayed="true" />
    </android.widget.LinearLayout>
  </android.widget.FrameLayout>
</hierarchy>
"""

IOS_SOURCE = """<?xml version="1.0" encoding="UTF-8"?>
<AppiumAUT>
  <XCUIElementTypeApplication type="XCUIElementTypeApplication" name="Example" label="Example" enabled="true" visible="true" accessible="false" x="0" y="0" width="390" height="844">
    <XCUIElementTypeWindow type="XCUIElementTypeWindow" enabled="true" visible="true" accessible="false" x="0" y="0" width="390" height="844">
      <XCUIElementTypeOther type="XCUIElementTypeOther" enabled="false" visible="true" accessible="false" x="0" y="0" width="390" height="844">
        <XCUIElementTypeStaticText type="XCUIElementTypeStaticText" value="Welcome" name="Welcome" label="Welcome" enabled="false" visible="true" accessible="false" x="20" y="100" width="350" height="40"/>
        <XCUIElementTypeButton type="XCUIElementTypeButton" name="loginButton" label="Log in" enabled="true" visible="true" accessible="true" x="20" y="200" width="350" height="50"/>
        <XCUIElementTypeTextField type="XCUIElementTypeTextField" value="Email" label="" enabled="true" visible="true" accessible="true" x="20" y="300" width="350" height="44"/>
      </XCUIElementTypeOther>
    </XCUIElementTypeWindow>
  </XCUIElementTypeApplication>
</AppiumAUT>
"""


@pytest.fixture
def android_source() -> str:
	return ANDROID_SOURCE


@pytest.fixture
def ios_source() -> str:
	return IOS_SOURCE


@pytest.fixture
def android_driver() -> FakeDriver:
	return FakeDriver(ANDROID_SOURCE, platform='android', window_size={'width': 1080, 'height': 2400})


@pytest.fixture
def ios_driver() -> FakeDriver:
	return FakeDriver(IOS_SOURCE, platform='ios', window_size={'width': 390, 'height': 844})
