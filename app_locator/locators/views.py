from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from app_locator.utils import valid_or_none


class Platform(str, Enum):
	ANDROID = 'android'
	IOS = 'ios'
	WEB = 'web'

	@classmethod
	def from_value(cls, value: 'Platform | str') -> 'Platform':
		if isinstance(value, Platform):
			return value
		return cls(value.strip().lower())


class Rectangle(BaseModel):
	# Live locations of partially off-screen elements can be negative, sizes never are
	x: int = 0
	y: int = 0
	width: int = Field(default=0, ge=0)
	height: int = Field(default=0, ge=0)

	def is_within(self, viewport_width: int, viewport_height: int) -> bool:
		"""True when the whole rectangle lies inside [0, 0, viewport_width, viewport_height]."""
		return (
			self.x >= 0
			and self.y >= 0
			and self.x + self.width <= viewport_width
			and self.y + self.height <= viewport_height
		)


class NormalizedNode(BaseModel):
	"""One element of a parsed page source.

	`path` holds the zero-based sibling indices leading from the root to this node;
	the root's path is empty.
	"""

	model_config = ConfigDict(frozen=True)

	tag_name: str
	attributes: dict[str, str] = Field(default_factory=dict)
	children: list[NormalizedNode] = Field(default_factory=list)
	path: tuple[int, ...] = ()

	@property
	def path_string(self) -> str:
		return '.'.join(str(index) for index in self.path)

	def get(self, name: str) -> str | None:
		return self.attributes.get(name)

	def __repr__(self) -> str:
		return f'<NormalizedNode {self.tag_name} path={self.path_string!r} attrs={len(self.attributes)} children={len(self.children)}>'


class FilterPolicy(BaseModel):
	"""Which snapshot nodes count as interactable, structural or content bearing for one platform."""

	model_config = ConfigDict(frozen=True)

	platform: Platform
	interactable_tags: frozenset[str] = frozenset()
	layout_containers: frozenset[str] = frozenset()
	# Attributes that make any tag interactable when set to "true"
	interactable_attributes: tuple[str, ...] = ()
	content_attributes: tuple[str, ...] = ()
	visibility_attribute: str | None = None

	include_tag_names: frozenset[str] | None = None
	exclude_tag_names: frozenset[str] = frozenset()
	require_attributes: tuple[str, ...] = ()
	min_attribute_count: int = 0
	interactable_only: bool = False
	include_layout_containers: bool = False
	visible_only: bool = False


class LocatorStrategy(str, Enum):
	ID = 'id'
	ACCESSIBILITY_ID = 'accessibility id'
	TEXT = 'text'
	CLASS_NAME = 'class name'
	ANDROID_UIAUTOMATOR = '-android uiautomator'
	IOS_PREDICATE = '-ios predicate string'
	IOS_CLASS_CHAIN = '-ios class chain'
	CSS_SELECTOR = 'css selector'
	XPATH = 'xpath'


class LocatorCandidate(BaseModel):
	model_config = ConfigDict(frozen=True)

	strategy: LocatorStrategy
	selector: str
	rank: int
	# The snapshot attribute (and its value) the selector was derived from; None for path-based fallbacks
	attribute: str | None = None
	value: str | None = None


class AndroidAttributes(BaseModel):
	platform: Literal['android'] = 'android'
	resource_id: str | None = None
	content_desc: str | None = None
	text: str | None = None
	class_name: str | None = None

	@classmethod
	def from_node_attributes(cls, attributes: dict[str, str]) -> 'AndroidAttributes':
		return cls(
			resource_id=attributes.get('resource-id'),
			content_desc=attributes.get('content-desc'),
			text=attributes.get('text'),
			class_name=attributes.get('class'),
		)


class IOSAttributes(BaseModel):
	platform: Literal['ios'] = 'ios'
	accessibility_id: str | None = None
	label: str | None = None
	text: str | None = None
	value: str | None = None
	class_name: str | None = None

	@property
	def visible_text(self) -> str | None:
		return valid_or_none(self.text) or valid_or_none(self.label)

	@classmethod
	def from_node_attributes(cls, attributes: dict[str, str], tag_name: str | None = None) -> 'IOSAttributes':
		return cls(
			accessibility_id=attributes.get('name'),
			label=attributes.get('label'),
			value=attributes.get('value'),
			class_name=attributes.get('type') or tag_name,
		)


class WebAttributes(BaseModel):
	platform: Literal['web'] = 'web'
	tag_name: str | None = None
	element_id: str | None = None
	test_id: str | None = None
	aria_label: str | None = None
	name: str | None = None
	text: str | None = None
	css_path: str | None = None


PlatformAttributes = Annotated[AndroidAttributes | IOSAttributes | WebAttributes, Field(discriminator='platform')]
