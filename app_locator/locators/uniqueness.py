"""
Selector uniqueness checks against a page source.

The textual checker counts literal `attribute="value"` occurrences in the raw
document. It needs no re-parse but is only an approximation: an attribute whose
name ends with the queried name (e.g. `android:text` when asking for `text`)
matches as well. StructuralUniquenessChecker compares attribute values on the
parsed tree instead and can be swapped in wherever a checker is accepted.
"""

import re
from typing import Protocol, runtime_checkable
from xml.sax.saxutils import escape

from app_locator.locators.source_parsing import ESCAPED_NEWLINE, iter_element_tree
from app_locator.locators.views import NormalizedNode


def count_attribute_occurrences(source_xml: str, attribute: str, value: str) -> int:
	"""Number of `attribute="value"` (or single-quoted) matches, the value taken literally."""
	pattern = re.compile(f'{re.escape(attribute)}=["\']{re.escape(value)}["\']')
	return len(pattern.findall(source_xml))


def is_attribute_unique(source_xml: str, attribute: str, value: str) -> bool:
	return count_attribute_occurrences(source_xml, attribute, value) == 1


is_unique = is_attribute_unique


@runtime_checkable
class UniquenessChecker(Protocol):
	def count(self, attribute: str, value: str) -> int: ...

	def is_unique(self, attribute: str, value: str) -> bool: ...


class TextualUniquenessChecker:
	def __init__(self, source_xml: str):
		self.source_xml = source_xml

	def count(self, attribute: str, value: str) -> int:
		# Values come from the parsed tree; line breaks only survive parsing as character references
		raw_value = escape(value, {'"': '&quot;'}).replace(ESCAPED_NEWLINE, '&#10;')
		return count_attribute_occurrences(self.source_xml, attribute, raw_value)

	def is_unique(self, attribute: str, value: str) -> bool:
		return self.count(attribute, value) == 1


class StructuralUniquenessChecker:
	def __init__(self, root: NormalizedNode):
		self.root = root

	def count(self, attribute: str, value: str) -> int:
		return sum(1 for node in iter_element_tree(self.root) if node.attributes.get(attribute) == value)

	def is_unique(self, attribute: str, value: str) -> bool:
		return self.count(attribute, value) == 1
