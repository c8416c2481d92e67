# @file purpose: Tests for the Appium and CDP driver adapters, using mocked clients
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
from appium.webdriver.common.appiumby import AppiumBy

from app_locator.driver import AppiumDriver, CdpWebDriver, Driver, ElementHandle
from app_locator.driver.appium import AppiumElement
from app_locator.exceptions import DriverUnavailable
from app_locator.locators.views import Platform
from app_locator.scanner import scan
from tests.conftest import ANDROID_SOURCE


def appium_element(**attributes) -> Mock:
	element = Mock()
	element.is_displayed.return_value = True
	element.is_enabled.return_value = True
	element.tag_name = 'android.widget.Button'
	element.text = attributes.get('text', '')
	element.location = {'x': 10.0, 'y': 20.0}
	element.size = {'width': 30, 'height': 40}
	element.get_attribute.side_effect = lambda name: attributes.get(name.replace('-', '_'))
	return element


class TestAppiumDriver:
	def test_satisfies_protocols(self):
		assert isinstance(AppiumDriver(Mock(session_id='abc')), Driver)
		assert isinstance(AppiumElement(Mock()), ElementHandle)

	def test_session_detection(self):
		assert AppiumDriver(Mock(session_id='abc')).has_session
		assert not AppiumDriver(Mock(session_id=None)).has_session
		assert not AppiumDriver(None).has_session

	async def test_calls_without_session_raise(self):
		with pytest.raises(DriverUnavailable):
			await AppiumDriver(None).get_page_source()

	async def test_query_and_element_reads(self):
		webdriver = Mock(session_id='abc')
		webdriver.find_elements.return_value = [appium_element(text='OK', resource_id='app:id/ok')]
		driver = AppiumDriver(webdriver)

		handles = await driver.query_elements('//*[@clickable="true"]')
		element = handles[0]

		webdriver.find_elements.assert_called_once_with(AppiumBy.XPATH, '//*[@clickable="true"]')
		assert await element.get_text() == 'OK'
		assert await element.get_attribute('resource-id') == 'app:id/ok'
		assert await element.get_attribute('content-desc') is None
		assert await element.get_location() == {'x': 10, 'y': 20}
		assert await element.get_size() == {'width': 30, 'height': 40}

	async def test_scan_through_appium_adapter(self):
		webdriver = Mock(session_id='abc', page_source=ANDROID_SOURCE)
		webdriver.find_elements.return_value = [
			appium_element(text='Sign in', resource_id='com.example:id/login', content_desc='Sign in button'),
		]
		webdriver.get_window_size.return_value = {'width': 1080, 'height': 2400}

		result = await scan(AppiumDriver(webdriver), Platform.ANDROID)

		assert len(result) == 1
		assert result[0].selector == 'android=new UiSelector().resourceId("com.example:id/login")'
		assert result[0].bounds.x == 10


class TestCdpWebDriver:
	def connected(self, evaluate_result=None) -> CdpWebDriver:
		driver = CdpWebDriver('ws://localhost:9222/devtools/browser/abc')
		driver.cdp_client = Mock()
		driver.cdp_client.send.Runtime.evaluate = AsyncMock(return_value=evaluate_result or {})
		driver.session_id = 'session-1'
		return driver

	async def test_execute_script_wraps_body_and_passes_args(self):
		driver = self.connected({'result': {'type': 'object', 'value': [1, 2]}})

		value = await driver.execute_script('return arguments;', 'a', 3)

		params = driver.cdp_client.send.Runtime.evaluate.call_args.kwargs['params']
		assert value == [1, 2]
		assert params['returnByValue'] is True
		assert params['awaitPromise'] is True
		assert params['expression'].startswith('(function() { return arguments;')
		assert params['expression'].endswith(f'.apply(null, {json.dumps(["a", 3])})')

	async def test_script_exception_raises(self):
		driver = self.connected({'exceptionDetails': {'text': 'Uncaught', 'exception': {'description': 'ReferenceError: x'}}})

		with pytest.raises(RuntimeError, match='ReferenceError'):
			await driver.execute_script('return x;')

	async def test_window_size_from_layout_metrics(self):
		driver = self.connected()
		driver.cdp_client.send.Page.getLayoutMetrics = AsyncMock(
			return_value={'cssVisualViewport': {'clientWidth': 1280.0, 'clientHeight': 720.5}}
		)

		assert await driver.get_window_size() == {'width': 1280, 'height': 720}

	async def test_requires_session(self):
		driver = CdpWebDriver('ws://localhost:9222')

		assert not driver.has_session
		with pytest.raises(DriverUnavailable):
			await driver.execute_script('return 1;')

	async def test_attach_picks_matching_page(self):
		driver = CdpWebDriver('ws://localhost:9222', page_url='https://example.com/')
		driver.cdp_client = Mock()
		driver.cdp_client.send.Target.getTargets = AsyncMock(
			return_value={
				'targetInfos': [
					{'targetId': 't1', 'type': 'page', 'url': 'about:blank'},
					{'targetId': 't2', 'type': 'service_worker', 'url': 'https://example.com/'},
					{'targetId': 't3', 'type': 'page', 'url': 'https://example.com/'},
				]
			}
		)
		driver.cdp_client.send.Target.attachToTarget = AsyncMock(return_value={'sessionId': 'session-3'})
		driver.cdp_client.send.Runtime.enable = AsyncMock()

		assert await driver._attach_to_page() == 'session-3'
		driver.cdp_client.send.Target.attachToTarget.assert_awaited_once_with(params={'targetId': 't3', 'flatten': True})

	async def test_connect_failure_is_driver_unavailable(self):
		client = Mock()
		client.start = AsyncMock(side_effect=ConnectionRefusedError('refused'))
		client.stop = AsyncMock()

		with patch('app_locator.driver.cdp.CDPClient', return_value=client):
			driver = CdpWebDriver('ws://localhost:1/devtools/browser/x')
			with pytest.raises(DriverUnavailable):
				await driver.connect()

		assert not driver.has_session
		client.stop.assert_awaited_once()

	async def test_native_scan_is_refused(self):
		"""Element queries are not available over CDP, a native scan reads as a driver error"""
		driver = self.connected({'result': {'value': '<hierarchy><node clickable="true"/></hierarchy>'}})

		with pytest.raises(DriverUnavailable):
			await driver.query_elements('//*')
		with pytest.raises(DriverUnavailable):
			await scan(driver, Platform.ANDROID)

	async def test_web_scan_through_cdp(self):
		driver = self.connected(
			{
				'result': {
					'value': [
						{'tagName': 'button', 'id': 'go', 'text': 'Go', 'bounds': {'x': 0, 'y': 0, 'width': 10, 'height': 10}},
					]
				}
			}
		)
		driver.cdp_client.send.Page.getLayoutMetrics = AsyncMock(side_effect=RuntimeError('no metrics'))

		result = await scan(driver, Platform.WEB)

		assert [record.selector for record in result] == ['#go']
