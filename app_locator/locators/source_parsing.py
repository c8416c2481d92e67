# @file purpose: Parses Appium page source XML into a NormalizedNode tree with positional paths
"""
Page source parsing.

Turns the XML returned by `getPageSource()` (UiAutomator2 `hierarchy` documents,
XCUITest `AppiumAUT` documents) into an immutable tree of NormalizedNode objects.
Every node carries its positional path so it can be re-addressed later, either
through `find_by_path` or through the absolute XPath produced by `build_xpath`.
"""

import logging
from collections.abc import Iterator

from lxml import etree

from app_locator.exceptions import DocumentParseFailure
from app_locator.locators.views import NormalizedNode
from app_locator.utils import time_execution_sync

logger = logging.getLogger(__name__)

ESCAPED_NEWLINE = '\\n'


def _make_parser(recover: bool) -> etree.XMLParser:
	return etree.XMLParser(
		recover=recover,
		remove_comments=True,
		remove_pis=True,
		resolve_entities=False,
		no_network=True,
		huge_tree=True,
	)


def _qualified_name(name: str, prefixes: dict[str, str]) -> str:
	"""Render an lxml '{uri}local' name back to 'prefix:local' (or plain 'local')."""
	if not name.startswith('{'):
		return name
	uri, _, local = name[1:].partition('}')
	prefix = prefixes.get(uri)
	return f'{prefix}:{local}' if prefix else local


def _is_element(node) -> bool:
	# Comments and processing instructions have a callable as tag
	return isinstance(node.tag, str)


def _translate(element: etree._Element, path: tuple[int, ...]) -> NormalizedNode:
	prefixes = {uri: prefix for prefix, uri in (element.nsmap or {}).items() if prefix}

	attributes: dict[str, str] = {}
	for name, value in element.attrib.items():
		attributes[_qualified_name(name, prefixes)] = value.replace('\r\n', '\n').replace('\n', ESCAPED_NEWLINE)

	children = [
		_translate(child, path + (index,)) for index, child in enumerate(c for c in element if _is_element(c))
	]

	return NormalizedNode(
		tag_name=_qualified_name(element.tag, prefixes),
		attributes=attributes,
		children=children,
		path=path,
	)


def _parse_root(source: bytes) -> etree._Element:
	parser = _make_parser(recover=False)
	try:
		return etree.fromstring(source, parser)
	except etree.XMLSyntaxError as e:
		errors = [entry for entry in parser.error_log if entry.level >= etree.ErrorLevels.ERROR]
		if not errors or any(entry.domain != etree.ErrorDomains.NAMESPACE for entry in errors):
			raise DocumentParseFailure(f'Page source is not well-formed XML: {e}') from e

	# Only namespace errors (undeclared prefixes such as android:). Structure is sound, so recover.
	logger.debug('🔧 Page source uses undeclared namespace prefixes, re-parsing in recover mode')
	root = etree.fromstring(source, _make_parser(recover=True))
	if root is None:
		raise DocumentParseFailure('Page source could not be recovered from namespace errors')
	return root


@time_execution_sync('--parse_page_source')
def parse_page_source(source_xml: str | bytes) -> NormalizedNode:
	"""
	Parse an Appium page source into a NormalizedNode tree.

	Args:
		source_xml: The raw document returned by the driver.

	Returns:
		The root node (the first element of the document); its path is ().

	Raises:
		DocumentParseFailure: The markup is empty or not well-formed. No partial tree is ever returned.
	"""
	if source_xml is None:
		raise DocumentParseFailure('Page source is missing')

	raw = source_xml.encode('utf-8') if isinstance(source_xml, str) else source_xml
	if not raw.strip():
		raise DocumentParseFailure('Page source is empty')

	try:
		root = _parse_root(raw)
	except DocumentParseFailure as e:
		e.source_excerpt = raw[:200].decode('utf-8', errors='replace')
		logger.warning(f'⚠️ {e.message}')
		raise

	return _translate(root, ())


def try_parse_page_source(source_xml: str | bytes) -> NormalizedNode | None:
	"""Like parse_page_source but returns None instead of raising on malformed input."""
	try:
		return parse_page_source(source_xml)
	except DocumentParseFailure:
		return None


def iter_element_tree(root: NormalizedNode) -> Iterator[NormalizedNode]:
	stack = [root]
	while stack:
		node = stack.pop()
		yield node
		stack.extend(reversed(node.children))


def flatten_element_tree(root: NormalizedNode) -> list[NormalizedNode]:
	"""All nodes of the tree, depth-first, parents before children."""
	return list(iter_element_tree(root))


def find_by_path(root: NormalizedNode, path: tuple[int, ...]) -> NormalizedNode | None:
	node = root
	for index in path:
		if index < 0 or index >= len(node.children):
			return None
		node = node.children[index]
	return node


def build_xpath(root: NormalizedNode, path: tuple[int, ...]) -> str | None:
	"""Absolute positional XPath (`/hierarchy/android.widget.FrameLayout[1]/...`) for the node at `path`."""
	if not root.tag_name:
		return None

	steps = [f'/{root.tag_name}']
	node = root
	for index in path:
		if index < 0 or index >= len(node.children):
			return None
		child = node.children[index]
		position = 1 + sum(1 for sibling in node.children[:index] if sibling.tag_name == child.tag_name)
		steps.append(f'{child.tag_name}[{position}]')
		node = child
	return '/'.join(steps)
