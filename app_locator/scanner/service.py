import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from app_locator.driver.base import Driver, ElementHandle
from app_locator.exceptions import DocumentParseFailure, DriverUnavailable, ElementFaultIsolated, FetchError
from app_locator.locators.element_filter import build_interactable_query
from app_locator.locators.locator_generation import generate_candidates, select_selectors
from app_locator.locators.source_parsing import parse_page_source
from app_locator.locators.views import AndroidAttributes, IOSAttributes, Platform, Rectangle
from app_locator.logging_config import RESULT_LEVEL
from app_locator.scanner.views import ElementRecord, FetchResult, ScanContext, ScanResult
from app_locator.scanner.web import INTERACTABLE_ELEMENTS_SCRIPT, WebElementDescriptor
from app_locator.utils import chunked, time_execution_async

logger = logging.getLogger(__name__)

V = TypeVar('V')
T = TypeVar('T')

# Identifier attributes fetched per platform, on top of tag name and text
_PLATFORM_ATTRIBUTES: dict[Platform, tuple[str, ...]] = {
	Platform.ANDROID: ('resource-id', 'content-desc', 'class'),
	Platform.IOS: ('name', 'label', 'value', 'type'),
}


async def fetch_field(field: str, call: Callable[[], Awaitable[V]]) -> FetchResult[V]:
	"""Run one driver round-trip, turning any failure into a FetchResult error instead of raising."""
	try:
		return FetchResult(field=field, value=await call())
	except Exception as e:
		return FetchResult(field=field, error=FetchError(field, e))


class ElementScanner:
	"""
	Scans the live UI of one driver session for re-locatable elements.

	Native apps: the page source is parsed first (a broken snapshot aborts the scan
	with an error result), then the driver is queried once for every element flagged
	interactable and those elements are processed in fixed-size batches. Elements
	inside a batch run concurrently; a batch starts only when the previous one has
	fully settled. Any failure of a single element only drops that element.

	Web pages: one script call returns flat descriptors that go through the same
	batched, fault isolated pipeline.
	"""

	def __init__(self, driver: Driver | None, platform: Platform | str, context: ScanContext | None = None):
		self.driver = driver
		self.platform = Platform.from_value(platform)
		self.context = context or ScanContext()

	@time_execution_async('--scan')
	async def scan(self) -> ScanResult:
		driver = self._require_driver()
		self.context.reset()

		if self.platform == Platform.WEB:
			result = await self._scan_web(driver)
		else:
			result = await self._scan_native(driver)

		stats = result.stats
		if result.ok:
			logger.log(
				RESULT_LEVEL,
				f'📱 {self.platform.value} scan: {stats.emitted} elements from {stats.total} candidates '
				f'({stats.not_displayed} hidden, {stats.no_locator} without locator, {stats.faulted} faulted, {stats.batches} batches)',
			)
		return result

	def _require_driver(self) -> Driver:
		if self.driver is None or not getattr(self.driver, 'has_session', True):
			raise DriverUnavailable('No active driver session')
		return self.driver

	async def _scan_native(self, driver: Driver) -> ScanResult:
		ctx = self.context

		try:
			source = await driver.get_page_source()
		except DriverUnavailable:
			raise
		except Exception as e:
			raise DriverUnavailable(f'Could not read page source: {e}') from e

		# The element queries run against the live session; the parse only rejects broken sources
		try:
			parse_page_source(source)
		except DocumentParseFailure as e:
			logger.warning(f'❌ No usable snapshot, aborting scan: {e.message}')
			return ScanResult(platform=self.platform, elements=[], error=e.message, stats=ctx.stats)

		query = build_interactable_query(self.platform, ctx.policy)
		try:
			handles = await driver.query_elements(query)
		except DriverUnavailable:
			raise
		except Exception as e:
			raise DriverUnavailable(f'Element query failed: {e}') from e

		logger.debug(f'🔍 {len(handles)} interactable candidates for {query}')
		await self._resolve_viewport(driver)
		elements = await self._run_batches(handles, self._process_native_element)
		return ScanResult(platform=self.platform, elements=elements, stats=ctx.stats)

	async def _scan_web(self, driver: Driver) -> ScanResult:
		ctx = self.context

		try:
			descriptors = await driver.execute_script(INTERACTABLE_ELEMENTS_SCRIPT)
		except DriverUnavailable:
			raise
		except Exception as e:
			raise DriverUnavailable(f'Could not collect element descriptors: {e}') from e

		if not isinstance(descriptors, list):
			logger.warning(f'❌ Page returned {type(descriptors).__name__} instead of element descriptors')
			return ScanResult(
				platform=self.platform, elements=[], error='Page did not return a list of element descriptors', stats=ctx.stats
			)

		await self._resolve_viewport(driver)
		elements = await self._run_batches(descriptors, self._process_web_descriptor)
		return ScanResult(platform=self.platform, elements=elements, stats=ctx.stats)

	async def _resolve_viewport(self, driver: Driver) -> None:
		ctx = self.context
		try:
			size = await driver.get_window_size()
			ctx.viewport_width, ctx.viewport_height = int(size['width']), int(size['height'])
		except Exception as e:
			# Unknown viewport: fall back to a huge one so nothing is filtered out
			logger.debug(f'⚠️ Window size unavailable ({e}), using {ctx.viewport_fallback}px fallback')
			ctx.viewport_width = ctx.viewport_height = ctx.viewport_fallback

	async def _run_batches(
		self, items: Sequence[T], process: Callable[[T], Awaitable[ElementRecord | None]]
	) -> list[ElementRecord]:
		ctx = self.context
		ctx.stats.total += len(items)
		elements: list[ElementRecord] = []

		for batch in chunked(items, ctx.batch_size):
			ctx.stats.batches += 1
			outcomes = await asyncio.gather(*(process(item) for item in batch), return_exceptions=True)
			for outcome in outcomes:
				if isinstance(outcome, Exception):
					ctx.stats.faulted += 1
					logger.debug(f'Dropped element: {outcome}')
				elif isinstance(outcome, BaseException):
					raise outcome
				elif outcome is not None:
					elements.append(outcome)

		ctx.stats.emitted += len(elements)
		return elements

	async def _process_native_element(self, handle: ElementHandle) -> ElementRecord | None:
		try:
			if not await handle.is_displayed():
				self.context.stats.not_displayed += 1
				return None

			attribute_names = _PLATFORM_ATTRIBUTES[self.platform]
			results = await asyncio.gather(
				fetch_field('tag_name', handle.get_tag_name),
				fetch_field('text', handle.get_text),
				fetch_field('is_enabled', handle.is_enabled),
				fetch_field('location', handle.get_location),
				fetch_field('size', handle.get_size),
				*(fetch_field(name, lambda name=name: handle.get_attribute(name)) for name in attribute_names),
			)
		except Exception as e:
			raise ElementFaultIsolated(f'Element became stale or inaccessible: {e}') from e

		return self._fold_native({result.field: result for result in results})

	def _fold_native(self, fields: dict[str, FetchResult[Any]]) -> ElementRecord | None:
		"""Combine per-field fetch results into a record, or None when the element has no usable locator."""
		ctx = self.context

		def value(name: str) -> Any:
			return fields[name].value_or(None)

		location = fields['location'].value_or({'x': 0, 'y': 0})
		size = fields['size'].value_or({'width': 0, 'height': 0})
		try:
			bounds = Rectangle(
				x=int(location['x']),
				y=int(location['y']),
				width=max(0, int(size['width'])),
				height=max(0, int(size['height'])),
			)
		except (KeyError, TypeError, ValueError) as e:
			raise ElementFaultIsolated(f'Malformed geometry {location!r} / {size!r}') from e

		text = value('text')
		if self.platform == Platform.ANDROID:
			attributes: AndroidAttributes | IOSAttributes = AndroidAttributes(
				resource_id=value('resource-id'),
				content_desc=value('content-desc'),
				text=text,
				class_name=value('class'),
			)
			platform_fields = {
				'resource_id': value('resource-id'),
				'content_desc': value('content-desc'),
				'class_name': value('class'),
			}
		else:
			attributes = IOSAttributes(
				accessibility_id=value('name'),
				label=value('label'),
				text=text,
				value=value('value'),
				class_name=value('type'),
			)
			platform_fields = {
				'accessibility_id': value('name'),
				'label': value('label'),
				'value': value('value'),
				'class_name': value('type'),
			}

		selectors = select_selectors(generate_candidates(attributes, ctx.max_text_length), ctx.max_alternates)
		if selectors is None:
			ctx.stats.no_locator += 1
			return None
		primary, alternates = selectors

		return ElementRecord(
			selector=primary,
			alternative_selectors=alternates,
			tag_name=value('tag_name'),
			text=text,
			is_enabled=bool(fields['is_enabled'].value_or(True)),
			is_in_viewport=bounds.is_within(ctx.viewport_width, ctx.viewport_height),
			bounds=bounds,
			**platform_fields,
		)

	async def _process_web_descriptor(self, raw: Any) -> ElementRecord | None:
		ctx = self.context
		try:
			descriptor = WebElementDescriptor.model_validate(raw)
		except ValidationError as e:
			raise ElementFaultIsolated(f'Invalid element descriptor: {e.error_count()} errors') from e

		selectors = select_selectors(generate_candidates(descriptor.to_attributes(), ctx.max_text_length), ctx.max_alternates)
		if selectors is None:
			ctx.stats.no_locator += 1
			return None
		primary, alternates = selectors

		return ElementRecord(
			selector=primary,
			alternative_selectors=alternates,
			tag_name=descriptor.tag_name,
			text=descriptor.text,
			element_id=descriptor.id,
			accessibility_id=descriptor.aria_label,
			class_name=descriptor.class_name,
			is_enabled=descriptor.is_enabled,
			is_in_viewport=descriptor.bounds.is_within(ctx.viewport_width, ctx.viewport_height),
			bounds=descriptor.bounds,
		)


async def scan(driver: Driver | None, platform: Platform | str, context: ScanContext | None = None) -> ScanResult:
	"""
	Scan the current UI of `driver` and return its re-locatable elements.

	Raises:
		DriverUnavailable: There is no session, or the driver cannot provide a snapshot at all.
	"""
	return await ElementScanner(driver, platform, context).scan()
