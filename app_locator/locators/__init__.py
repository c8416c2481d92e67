"""Page source parsing, element classification and locator generation."""

from app_locator.locators.bounds import parse_android_bounds, parse_ios_bounds, resolve_bounds
from app_locator.locators.element_filter import (
	ANDROID_INTERACTABLE_TAGS,
	ANDROID_LAYOUT_CONTAINERS,
	IOS_INTERACTABLE_TAGS,
	IOS_LAYOUT_CONTAINERS,
	build_interactable_query,
	classify,
	get_default_filters,
	has_meaningful_content,
	is_interactable_element,
	is_layout_container,
	should_include_element,
)
from app_locator.locators.generate_all import (
	ElementWithLocators,
	generate_all_element_locators,
	get_best_locator,
	get_suggested_locators,
	locators_to_dict,
)
from app_locator.locators.locator_generation import generate_candidates, select_selectors
from app_locator.locators.source_parsing import (
	build_xpath,
	find_by_path,
	flatten_element_tree,
	parse_page_source,
	try_parse_page_source,
)
from app_locator.locators.uniqueness import (
	StructuralUniquenessChecker,
	TextualUniquenessChecker,
	UniquenessChecker,
	count_attribute_occurrences,
	is_attribute_unique,
	is_unique,
)
from app_locator.locators.views import (
	AndroidAttributes,
	FilterPolicy,
	IOSAttributes,
	LocatorCandidate,
	LocatorStrategy,
	NormalizedNode,
	Platform,
	PlatformAttributes,
	Rectangle,
	WebAttributes,
)

__all__ = [
	'ANDROID_INTERACTABLE_TAGS',
	'ANDROID_LAYOUT_CONTAINERS',
	'IOS_INTERACTABLE_TAGS',
	'IOS_LAYOUT_CONTAINERS',
	'AndroidAttributes',
	'ElementWithLocators',
	'FilterPolicy',
	'IOSAttributes',
	'LocatorCandidate',
	'LocatorStrategy',
	'NormalizedNode',
	'Platform',
	'PlatformAttributes',
	'Rectangle',
	'StructuralUniquenessChecker',
	'TextualUniquenessChecker',
	'UniquenessChecker',
	'WebAttributes',
	'build_interactable_query',
	'build_xpath',
	'classify',
	'count_attribute_occurrences',
	'find_by_path',
	'flatten_element_tree',
	'generate_all_element_locators',
	'generate_candidates',
	'get_best_locator',
	'get_default_filters',
	'get_suggested_locators',
	'has_meaningful_content',
	'is_attribute_unique',
	'is_interactable_element',
	'is_layout_container',
	'is_unique',
	'locators_to_dict',
	'parse_android_bounds',
	'parse_ios_bounds',
	'parse_page_source',
	'resolve_bounds',
	'select_selectors',
	'should_include_element',
	'try_parse_page_source',
]
