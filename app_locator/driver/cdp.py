"""Chrome DevTools Protocol adapter used for web page scans."""

import json
import logging
import time
from typing import Any

import httpx
from cdp_use import CDPClient

from app_locator.driver.base import Size
from app_locator.exceptions import DriverUnavailable

logger = logging.getLogger(__name__)


class CdpWebDriver:
	"""
	Attaches to one page of a running Chrome and evaluates read-only scripts in it.

	Either pass a websocket URL or the DevTools HTTP root (http://localhost:9222);
	`page_url` picks the tab, otherwise the first page target is used.
	"""

	def __init__(self, cdp_url: str, page_url: str | None = None):
		self.cdp_url = cdp_url
		self.page_url = page_url

		self.cdp_client: CDPClient | None = None
		self.session_id: str | None = None

	@property
	def has_session(self) -> bool:
		return self.cdp_client is not None and self.session_id is not None

	async def _resolve_ws_url(self) -> str:
		# If the cdp_url is already a websocket URL, use it as-is.
		if self.cdp_url.startswith('ws'):
			return self.cdp_url

		# Otherwise, treat it as the DevTools HTTP root and fetch the websocket URL.
		url = self.cdp_url.rstrip('/')
		if not url.endswith('/json/version'):
			url = url + '/json/version'
		async with httpx.AsyncClient() as client:
			version_info = await client.get(url)
			return version_info.json()['webSocketDebuggerUrl']

	async def connect(self) -> 'CdpWebDriver':
		if self.has_session:
			return self
		try:
			ws_url = await self._resolve_ws_url()
			self.cdp_client = CDPClient(ws_url)
			await self.cdp_client.start()
			self.session_id = await self._attach_to_page()
		except DriverUnavailable:
			await self.close()
			raise
		except Exception as e:
			await self.close()
			raise DriverUnavailable(f'Could not connect to Chrome at {self.cdp_url}: {e}') from e
		return self

	async def _attach_to_page(self) -> str:
		assert self.cdp_client is not None

		start_get_targets = time.time()
		targets = await self.cdp_client.send.Target.getTargets()
		logger.debug(f'⏱️ Target.getTargets() took {time.time() - start_get_targets:.3f} seconds')

		pages = [target for target in targets['targetInfos'] if target['type'] == 'page']
		if self.page_url:
			pages = [target for target in pages if target.get('url') == self.page_url]
		if not pages:
			raise DriverUnavailable(f'No page target found for URL: {self.page_url or "<any>"}')

		session = await self.cdp_client.send.Target.attachToTarget(params={'targetId': pages[0]['targetId'], 'flatten': True})
		session_id = session['sessionId']
		await self.cdp_client.send.Runtime.enable(session_id=session_id)
		logger.debug(f'📎 Attached to page: {pages[0].get("url", "")[:60]}')
		return session_id

	async def close(self) -> None:
		client, self.cdp_client, self.session_id = self.cdp_client, None, None
		if client is not None:
			try:
				await client.stop()
			except Exception as e:
				logger.debug(f'Error while closing CDP client: {e}')

	async def __aenter__(self):
		return await self.connect()

	async def __aexit__(self, exc_type, exc_value, traceback):
		await self.close()

	def _require_session(self) -> tuple[CDPClient, str]:
		if self.cdp_client is None or self.session_id is None:
			raise DriverUnavailable('No active CDP session')
		return self.cdp_client, self.session_id

	async def execute_script(self, script: str, *args: Any) -> Any:
		"""Run a WebDriver-style script body (`return ...`) with JSON-serialisable arguments."""
		cdp_client, session_id = self._require_session()
		expression = f'(function() {{ {script} \n}}).apply(null, {json.dumps(list(args))})'
		result = await cdp_client.send.Runtime.evaluate(
			params={'expression': expression, 'returnByValue': True, 'awaitPromise': True},
			session_id=session_id,
		)
		if result.get('exceptionDetails'):
			details = result['exceptionDetails']
			raise RuntimeError(f'Script failed: {details.get("exception", {}).get("description") or details.get("text")}')
		return result.get('result', {}).get('value')

	async def get_page_source(self) -> str:
		return await self.execute_script('return document.documentElement.outerHTML;')

	async def get_window_size(self) -> Size:
		cdp_client, session_id = self._require_session()
		metrics = await cdp_client.send.Page.getLayoutMetrics(session_id=session_id)

		# Use CSS pixels (what JavaScript sees) instead of device pixels
		css_visual_viewport = metrics.get('cssVisualViewport', {})
		css_layout_viewport = metrics.get('cssLayoutViewport', {})
		width = css_visual_viewport.get('clientWidth', css_layout_viewport.get('clientWidth', 1920.0))
		height = css_visual_viewport.get('clientHeight', css_layout_viewport.get('clientHeight', 1080.0))
		return {'width': int(width), 'height': int(height)}

	async def query_elements(self, xpath: str) -> list:
		# Web scans go through execute_script, element handles are never exposed
		raise DriverUnavailable('CdpWebDriver only supports web scans')
