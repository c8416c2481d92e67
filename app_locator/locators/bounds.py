import re
from typing import Any

from app_locator.locators.views import NormalizedNode, Platform, Rectangle

ANDROID_BOUNDS_RE = re.compile(r'\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]')


def parse_android_bounds(bounds: str | None) -> Rectangle:
	"""Parse UiAutomator2 bounds "[x1,y1][x2,y2]". Anything unparseable gives a zero rectangle."""
	if not isinstance(bounds, str):
		return Rectangle()
	match = ANDROID_BOUNDS_RE.search(bounds)
	if not match:
		return Rectangle()

	try:
		x1, y1, x2, y2 = (int(group) for group in match.groups())
	except ValueError:
		# Digit strings beyond the interpreter's int conversion limit
		return Rectangle()
	return Rectangle(x=x1, y=y1, width=max(0, x2 - x1), height=max(0, y2 - y1))


def _parse_int(value: Any) -> int:
	if value is None:
		return 0
	try:
		return int(float(str(value).strip()))
	except (TypeError, ValueError, OverflowError):
		return 0


def parse_ios_bounds(attributes: dict[str, Any]) -> Rectangle:
	"""Build a rectangle from XCUITest x/y/width/height attributes, defaulting every missing value to 0."""
	return Rectangle(
		x=_parse_int(attributes.get('x')),
		y=_parse_int(attributes.get('y')),
		width=max(0, _parse_int(attributes.get('width'))),
		height=max(0, _parse_int(attributes.get('height'))),
	)


def resolve_bounds(node: NormalizedNode, platform: Platform) -> Rectangle:
	if platform == Platform.ANDROID:
		return parse_android_bounds(node.attributes.get('bounds'))
	return parse_ios_bounds(node.attributes)
