# @file purpose: Generates verified locators for every relevant node of a static page source
import logging

from pydantic import BaseModel, ConfigDict

from app_locator.locators.bounds import resolve_bounds
from app_locator.locators.element_filter import get_default_filters, should_include_element
from app_locator.locators.locator_generation import generate_candidates
from app_locator.locators.source_parsing import build_xpath, iter_element_tree, parse_page_source
from app_locator.locators.uniqueness import TextualUniquenessChecker, UniquenessChecker
from app_locator.locators.views import (
	AndroidAttributes,
	FilterPolicy,
	IOSAttributes,
	LocatorCandidate,
	LocatorStrategy,
	NormalizedNode,
	Platform,
	Rectangle,
)
from app_locator.utils import time_execution_sync

logger = logging.getLogger(__name__)


class ElementWithLocators(BaseModel):
	model_config = ConfigDict(frozen=True)

	node: NormalizedNode
	bounds: Rectangle
	locators: list[LocatorCandidate]


def attributes_from_node(node: NormalizedNode, platform: Platform) -> AndroidAttributes | IOSAttributes:
	if platform == Platform.ANDROID:
		return AndroidAttributes.from_node_attributes(node.attributes)
	if platform == Platform.IOS:
		return IOSAttributes.from_node_attributes(node.attributes, tag_name=node.tag_name)
	raise ValueError(f'Page source locators are only available for native platforms, got {platform.value!r}')


def get_suggested_locators(
	node: NormalizedNode,
	platform: Platform | str,
	checker: UniquenessChecker,
	root: NormalizedNode | None = None,
	max_text_length: int | None = None,
) -> list[LocatorCandidate]:
	"""
	Candidates for `node` that the checker confirms unique in the snapshot, re-ranked from 0.

	When `root` is given, an absolute positional XPath is appended as the last resort.
	"""
	platform = Platform.from_value(platform)
	verified: list[LocatorCandidate] = []
	for candidate in generate_candidates(attributes_from_node(node, platform), max_text_length=max_text_length):
		if candidate.attribute is None or not checker.is_unique(candidate.attribute, candidate.value or ''):
			continue
		verified.append(candidate.model_copy(update={'rank': len(verified)}))

	if root is not None:
		fallback = build_xpath(root, node.path)
		if fallback:
			verified.append(LocatorCandidate(strategy=LocatorStrategy.XPATH, selector=fallback, rank=len(verified)))
	return verified


def get_best_locator(
	node: NormalizedNode,
	platform: Platform | str,
	checker: UniquenessChecker,
	root: NormalizedNode | None = None,
) -> LocatorCandidate | None:
	locators = get_suggested_locators(node, platform, checker, root=root)
	return locators[0] if locators else None


def locators_to_dict(locators: list[LocatorCandidate]) -> dict[str, str]:
	"""Strategy -> selector, keeping the best-ranked selector per strategy."""
	result: dict[str, str] = {}
	for locator in sorted(locators, key=lambda candidate: candidate.rank):
		result.setdefault(locator.strategy.value, locator.selector)
	return result


@time_execution_sync('--generate_all_element_locators')
def generate_all_element_locators(
	source_xml: str,
	platform: Platform | str,
	policy: FilterPolicy | None = None,
	checker: UniquenessChecker | None = None,
	max_text_length: int | None = None,
) -> list[ElementWithLocators]:
	"""
	Walk a whole page source and return verified locators for every node the filter policy keeps.

	Raises:
		DocumentParseFailure: The page source is not well-formed.
	"""
	platform = Platform.from_value(platform)
	root = parse_page_source(source_xml)
	policy = policy or get_default_filters(platform)
	checker = checker or TextualUniquenessChecker(source_xml)

	elements: list[ElementWithLocators] = []
	total = 0
	for node in iter_element_tree(root):
		total += 1
		if not should_include_element(node, platform, policy):
			continue
		locators = get_suggested_locators(node, platform, checker, root=root, max_text_length=max_text_length)
		elements.append(ElementWithLocators(node=node, bounds=resolve_bounds(node, platform), locators=locators))

	logger.debug(f'🧭 Generated locators for {len(elements)} of {total} {platform.value} nodes in page source')
	return elements
