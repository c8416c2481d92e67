# @file purpose: Tests for web page scans driven by element descriptors
from unittest.mock import AsyncMock

import pytest

from app_locator.exceptions import DriverUnavailable
from app_locator.locators.views import Platform, Rectangle
from app_locator.scanner import ScanContext, scan
from app_locator.scanner.web import INTERACTABLE_ELEMENTS_SCRIPT, WebElementDescriptor
from tests.conftest import FakeDriver


def descriptor(**overrides):
	base = {
		'tagName': 'button',
		'id': None,
		'testId': None,
		'ariaLabel': None,
		'name': None,
		'type': None,
		'href': None,
		'text': None,
		'className': None,
		'cssPath': None,
		'isEnabled': True,
		'bounds': {'x': 10, 'y': 20, 'width': 100, 'height': 30},
	}
	base.update(overrides)
	return base


def web_driver(descriptors, window_size=None) -> FakeDriver:
	return FakeDriver('<html/>', platform='web', script_result=descriptors, window_size=window_size or {'width': 1280, 'height': 720})


class TestWebScan:
	async def test_descriptors_become_records(self):
		driver = web_driver(
			[
				descriptor(id='submit', text='Submit', className='btn primary', cssPath='form > button'),
				descriptor(tagName='a', ariaLabel='Home', text='Home', href='/'),
			]
		)

		result = await scan(driver, Platform.WEB)
		submit, home = result

		assert submit.selector == '#submit'
		assert submit.alternative_selectors == ['button=Submit']
		assert submit.element_id == 'submit'
		assert submit.class_name == 'btn primary'
		assert submit.bounds == Rectangle(x=10, y=20, width=100, height=30)
		assert home.selector == 'aria/Home'
		assert home.accessibility_id == 'Home'
		assert home.tag_name == 'a'

	async def test_invalid_and_unlocatable_descriptors_are_dropped(self):
		driver = web_driver(
			[
				descriptor(testId='save'),
				{'id': 'no-tag'},
				'not a descriptor',
				descriptor(tagName='div'),
			]
		)

		result = await scan(driver, Platform.WEB)

		assert [record.selector for record in result] == ['[data-testid="save"]']
		assert result.stats.faulted == 2
		assert result.stats.no_locator == 1
		assert result.stats.total == 4

	async def test_viewport_and_enabled_flags(self):
		driver = web_driver(
			[
				descriptor(id='below', bounds={'x': 0, 'y': 900, 'width': 50, 'height': 50}),
				descriptor(id='disabled', isEnabled=False),
			]
		)

		below, disabled = await scan(driver, Platform.WEB)

		assert not below.is_in_viewport
		assert disabled.is_in_viewport
		assert disabled.is_enabled is False

	async def test_batches_preserve_order(self):
		driver = web_driver([descriptor(id=f'item-{index}') for index in range(23)])

		result = await scan(driver, Platform.WEB, ScanContext(batch_size=4))

		assert [record.element_id for record in result] == [f'item-{index}' for index in range(23)]
		assert result.stats.batches == 6

	async def test_script_is_sent_to_page(self):
		driver = web_driver([])
		driver.execute_script = AsyncMock(return_value=[])

		result = await scan(driver, Platform.WEB)

		driver.execute_script.assert_awaited_once_with(INTERACTABLE_ELEMENTS_SCRIPT)
		assert result.ok
		assert len(result) == 0

	async def test_non_list_result_is_an_error(self):
		result = await scan(web_driver({'error': 'boom'}), Platform.WEB)

		assert not result.ok
		assert len(result) == 0

	async def test_script_failure_aborts_scan(self):
		driver = web_driver([])
		driver.execute_script = AsyncMock(side_effect=RuntimeError('Target closed'))

		with pytest.raises(DriverUnavailable):
			await scan(driver, Platform.WEB)


class TestWebElementDescriptor:
	def test_negative_sizes_are_clamped(self):
		parsed = WebElementDescriptor.model_validate(descriptor(bounds={'x': -5, 'y': -10, 'width': -1, 'height': 12.6}))

		assert parsed.bounds == Rectangle(x=-5, y=-10, width=0, height=12)

	def test_unknown_keys_are_ignored(self):
		parsed = WebElementDescriptor.model_validate(descriptor(role='button'))

		assert parsed.tag_name == 'button'

	def test_to_attributes(self):
		attributes = WebElementDescriptor.model_validate(descriptor(id='x', cssPath='div > button')).to_attributes()

		assert attributes.element_id == 'x'
		assert attributes.css_path == 'div > button'
		assert attributes.tag_name == 'button'
