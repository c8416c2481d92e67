from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app_locator.config import CONFIG
from app_locator.exceptions import FetchError
from app_locator.locators.views import FilterPolicy, Platform, Rectangle
from app_locator.utils import valid_or_none

V = TypeVar('V')

_OPTIONAL_TEXT_FIELDS = (
	'tag_name',
	'text',
	'resource_id',
	'content_desc',
	'accessibility_id',
	'label',
	'element_id',
	'value',
	'class_name',
)


class ElementRecord(BaseModel):
	"""One re-locatable element found by a scan."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

	selector: str
	alternative_selectors: list[str] | None = None
	tag_name: str | None = None
	text: str | None = None
	# Android
	resource_id: str | None = None
	content_desc: str | None = None
	# iOS
	accessibility_id: str | None = None
	label: str | None = None
	# Web
	element_id: str | None = None
	value: str | None = None
	class_name: str | None = None
	is_enabled: bool = True
	is_in_viewport: bool = True
	bounds: Rectangle = Field(default_factory=Rectangle)

	@field_validator(*_OPTIONAL_TEXT_FIELDS, mode='before')
	@classmethod
	def _drop_unusable(cls, value: Any) -> str | None:
		return valid_or_none(value)

	@field_validator('alternative_selectors', mode='before')
	@classmethod
	def _drop_empty_alternates(cls, value: Any) -> list[str] | None:
		return list(value) if value else None

	def to_dict(self) -> dict[str, Any]:
		"""camelCase dict with every absent optional field left out."""
		return self.model_dump(by_alias=True, exclude_none=True, mode='json')


@dataclass
class ScanStats:
	total: int = 0
	emitted: int = 0
	not_displayed: int = 0
	no_locator: int = 0
	faulted: int = 0
	batches: int = 0

	@property
	def dropped(self) -> int:
		return self.not_displayed + self.no_locator + self.faulted


class ScanResult(BaseModel):
	"""Elements of one scan in batch order. Iterates and measures like the element list itself."""

	model_config = ConfigDict(arbitrary_types_allowed=True)

	platform: Platform
	elements: list[ElementRecord] = Field(default_factory=list)
	# Cause of a DocumentParseFailure; set only when no snapshot was available
	error: str | None = None
	stats: ScanStats = Field(default_factory=ScanStats)

	@property
	def ok(self) -> bool:
		return self.error is None

	def __iter__(self) -> Iterator[ElementRecord]:  # type: ignore[override]
		return iter(self.elements)

	def __len__(self) -> int:
		return len(self.elements)

	def __getitem__(self, index: int) -> ElementRecord:
		return self.elements[index]

	def to_dicts(self) -> list[dict[str, Any]]:
		return [element.to_dict() for element in self.elements]


@dataclass(frozen=True)
class FetchResult(Generic[V]):
	"""Outcome of one live attribute fetch: either a value or the error that replaced it."""

	field: str
	value: V | None = None
	error: FetchError | None = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def value_or(self, default: V) -> V:
		return default if self.error is not None or self.value is None else self.value


@dataclass
class ScanContext:
	"""Scan settings plus the state of the running scan. The state is reset whenever a scan starts, so a context can be reused."""

	batch_size: int = field(default_factory=lambda: CONFIG.APP_LOCATOR_BATCH_SIZE)
	max_alternates: int = field(default_factory=lambda: CONFIG.APP_LOCATOR_MAX_ALTERNATES)
	max_text_length: int = field(default_factory=lambda: CONFIG.APP_LOCATOR_MAX_TEXT_LENGTH)
	viewport_fallback: int = field(default_factory=lambda: CONFIG.APP_LOCATOR_VIEWPORT_FALLBACK)
	policy: FilterPolicy | None = None

	# Per-scan state, reset at the start of every scan
	viewport_width: int = 0
	viewport_height: int = 0
	stats: ScanStats = field(default_factory=ScanStats)

	def reset(self) -> None:
		self.viewport_width = self.viewport_height = 0
		self.stats = ScanStats()

	def __post_init__(self) -> None:
		if self.batch_size < 1:
			raise ValueError(f'batch_size must be >= 1, got {self.batch_size}')
