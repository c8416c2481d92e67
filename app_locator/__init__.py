from app_locator.config import CONFIG
from app_locator.logging_config import setup_logging

if CONFIG.APP_LOCATOR_SETUP_LOGGING:
	logger = setup_logging()
else:
	import logging

	logger = logging.getLogger('app_locator')

from app_locator.exceptions import AppLocatorError, DocumentParseFailure, DriverUnavailable  # noqa: E402
from app_locator.locators import (  # noqa: E402
	classify,
	generate_all_element_locators,
	generate_candidates,
	is_unique,
	parse_page_source,
)
from app_locator.locators.views import FilterPolicy, LocatorCandidate, NormalizedNode, Platform, Rectangle  # noqa: E402
from app_locator.scanner import ElementRecord, ScanContext, ScanResult, scan  # noqa: E402

__all__ = [
	'AppLocatorError',
	'DocumentParseFailure',
	'DriverUnavailable',
	'ElementRecord',
	'FilterPolicy',
	'LocatorCandidate',
	'NormalizedNode',
	'Platform',
	'Rectangle',
	'ScanContext',
	'ScanResult',
	'classify',
	'generate_all_element_locators',
	'generate_candidates',
	'is_unique',
	'parse_page_source',
	'scan',
]
