# @file purpose: Builds the ranked selector candidates for one element
"""
Locator candidate generation.

Priority order per platform (lower rank is tried first):

Android: resource-id > content-desc > text (short only) > class name
iOS:     accessibility id > text / label (short only) > class chain
Web:     id > data-testid > aria-label > name > text (short only) > CSS path

A value is usable only when present, not the literal "null" and not blank.
"""

from app_locator.config import CONFIG
from app_locator.locators import selectors
from app_locator.locators.selectors import AndroidSelectors, IOSSelectors
from app_locator.locators.views import (
	AndroidAttributes,
	IOSAttributes,
	LocatorCandidate,
	LocatorStrategy,
	WebAttributes,
)
from app_locator.utils import is_valid


class _CandidateList:
	"""Accumulates candidates, assigning ranks in generation order."""

	def __init__(self) -> None:
		self.candidates: list[LocatorCandidate] = []

	def add(self, strategy: LocatorStrategy, selector: str, attribute: str | None, value: str | None) -> None:
		self.candidates.append(
			LocatorCandidate(strategy=strategy, selector=selector, rank=len(self.candidates), attribute=attribute, value=value)
		)


def _short_text(text: str | None, max_text_length: int) -> bool:
	return is_valid(text) and len(text) < max_text_length


def _android_candidates(attributes: AndroidAttributes, max_text_length: int) -> list[LocatorCandidate]:
	result = _CandidateList()
	if is_valid(attributes.resource_id):
		result.add(LocatorStrategy.ID, AndroidSelectors.resource_id(attributes.resource_id), 'resource-id', attributes.resource_id)
	if is_valid(attributes.content_desc):
		result.add(
			LocatorStrategy.ACCESSIBILITY_ID,
			selectors.accessibility_id(attributes.content_desc),
			'content-desc',
			attributes.content_desc,
		)
	if _short_text(attributes.text, max_text_length):
		result.add(LocatorStrategy.TEXT, AndroidSelectors.text(attributes.text), 'text', attributes.text)
	if is_valid(attributes.class_name):
		result.add(LocatorStrategy.CLASS_NAME, AndroidSelectors.class_name(attributes.class_name), 'class', attributes.class_name)
	return result.candidates


def _ios_candidates(attributes: IOSAttributes, max_text_length: int) -> list[LocatorCandidate]:
	result = _CandidateList()
	if is_valid(attributes.accessibility_id):
		result.add(
			LocatorStrategy.ACCESSIBILITY_ID,
			selectors.accessibility_id(attributes.accessibility_id),
			'name',
			attributes.accessibility_id,
		)
	text = attributes.visible_text
	if _short_text(text, max_text_length):
		result.add(LocatorStrategy.IOS_PREDICATE, IOSSelectors.label(text), 'label', text)
	if is_valid(attributes.class_name):
		result.add(LocatorStrategy.IOS_CLASS_CHAIN, IOSSelectors.type(attributes.class_name), 'type', attributes.class_name)
	return result.candidates


def _web_candidates(attributes: WebAttributes, max_text_length: int) -> list[LocatorCandidate]:
	result = _CandidateList()
	tag_name = attributes.tag_name.lower() if is_valid(attributes.tag_name) else None

	if is_valid(attributes.element_id):
		result.add(LocatorStrategy.CSS_SELECTOR, selectors.css_id(attributes.element_id), 'id', attributes.element_id)
	if is_valid(attributes.test_id):
		result.add(
			LocatorStrategy.CSS_SELECTOR,
			selectors.css_attribute('data-testid', attributes.test_id),
			'data-testid',
			attributes.test_id,
		)
	if is_valid(attributes.aria_label):
		result.add(LocatorStrategy.ACCESSIBILITY_ID, selectors.aria_label(attributes.aria_label), 'aria-label', attributes.aria_label)
	if is_valid(attributes.name):
		result.add(LocatorStrategy.CSS_SELECTOR, selectors.css_attribute('name', attributes.name, tag_name), 'name', attributes.name)
	if tag_name and _short_text(attributes.text, max_text_length):
		result.add(LocatorStrategy.TEXT, selectors.element_text(tag_name, attributes.text.strip()), None, attributes.text)
	if is_valid(attributes.css_path):
		result.add(LocatorStrategy.CSS_SELECTOR, attributes.css_path, None, None)
	return result.candidates


def generate_candidates(
	attributes: AndroidAttributes | IOSAttributes | WebAttributes,
	max_text_length: int | None = None,
) -> list[LocatorCandidate]:
	"""
	Ordered selector candidates for one element.

	Args:
		attributes: The platform attribute bag of the element.
		max_text_length: Texts of this length or longer are not used as selectors.

	Returns:
		Candidates sorted by rank. Empty when nothing usable exists, in which case
		the element cannot be reliably re-located and should be skipped.
	"""
	limit = CONFIG.APP_LOCATOR_MAX_TEXT_LENGTH if max_text_length is None else max_text_length

	if isinstance(attributes, AndroidAttributes):
		return _android_candidates(attributes, limit)
	if isinstance(attributes, IOSAttributes):
		return _ios_candidates(attributes, limit)
	if isinstance(attributes, WebAttributes):
		return _web_candidates(attributes, limit)
	raise TypeError(f'Unsupported attribute bag: {type(attributes).__name__}')


def select_selectors(candidates: list[LocatorCandidate], max_alternates: int | None = None) -> tuple[str, list[str]] | None:
	"""Split candidates into (primary selector, alternates). None if there is no candidate at all."""
	if not candidates:
		return None
	limit = CONFIG.APP_LOCATOR_MAX_ALTERNATES if max_alternates is None else max_alternates
	ordered = sorted(candidates, key=lambda candidate: candidate.rank)
	return ordered[0].selector, [candidate.selector for candidate in ordered[1 : 1 + limit]]
