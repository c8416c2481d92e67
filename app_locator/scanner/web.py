# @file purpose: Collects flat interactable element descriptors from a web page
"""
Web element descriptors.

The page is asked once (via execute_script) for a flat list of descriptors of every
visible interactable element; each descriptor is then validated independently so a
malformed entry only drops itself.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app_locator.locators.views import Rectangle, WebAttributes

INTERACTABLE_ELEMENTS_SCRIPT = """
const interactableSelectors = [
	'a[href]', 'button', 'input:not([type="hidden"])', 'select', 'textarea',
	'[role="button"]', '[role="link"]', '[role="checkbox"]', '[role="radio"]', '[role="tab"]',
	'[role="menuitem"]', '[role="switch"]', '[role="option"]', '[role="textbox"]', '[role="combobox"]',
	'[onclick]', '[tabindex]:not([tabindex="-1"])', '[contenteditable="true"]'
];

function isVisible(el) {
	const style = window.getComputedStyle(el);
	if (style.display === 'none' || style.visibility === 'hidden' || parseFloat(style.opacity) === 0) return false;
	const rect = el.getBoundingClientRect();
	return rect.width > 0 && rect.height > 0;
}

function cssPath(el) {
	const parts = [];
	while (el && el.nodeType === Node.ELEMENT_NODE && el !== document.documentElement) {
		let part = el.tagName.toLowerCase();
		if (el.id) {
			parts.unshift(part + '#' + CSS.escape(el.id));
			break;
		}
		const parent = el.parentElement;
		if (parent) {
			const sameTag = Array.from(parent.children).filter(c => c.tagName === el.tagName);
			if (sameTag.length > 1) part += ':nth-of-type(' + (sameTag.indexOf(el) + 1) + ')';
		}
		parts.unshift(part);
		el = parent;
	}
	return parts.join(' > ');
}

const seen = new Set();
const result = [];
for (const el of document.querySelectorAll(interactableSelectors.join(','))) {
	if (seen.has(el) || !isVisible(el)) continue;
	seen.add(el);
	const rect = el.getBoundingClientRect();
	const text = (el.innerText || el.value || el.getAttribute('placeholder') || '').trim().replace(/\\s+/g, ' ');
	result.push({
		tagName: el.tagName.toLowerCase(),
		id: el.id || null,
		testId: el.getAttribute('data-testid'),
		ariaLabel: el.getAttribute('aria-label'),
		name: el.getAttribute('name'),
		type: el.getAttribute('type'),
		href: el.getAttribute('href'),
		text: text || null,
		className: typeof el.className === 'string' ? el.className : null,
		cssPath: cssPath(el),
		isEnabled: !el.disabled,
		bounds: {
			x: Math.round(rect.left),
			y: Math.round(rect.top),
			width: Math.round(rect.width),
			height: Math.round(rect.height)
		}
	});
}
return result;
"""


class WebElementDescriptor(BaseModel):
	"""One entry returned by INTERACTABLE_ELEMENTS_SCRIPT."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

	tag_name: str
	id: str | None = None
	test_id: str | None = None
	aria_label: str | None = None
	name: str | None = None
	type: str | None = None
	href: str | None = None
	text: str | None = None
	class_name: str | None = None
	css_path: str | None = None
	is_enabled: bool = True
	bounds: Rectangle = Field(default_factory=Rectangle)

	@field_validator('bounds', mode='before')
	@classmethod
	def _clamp_bounds(cls, value: Any) -> Any:
		# Elements partially scrolled off have negative x/y; sizes are never negative
		if isinstance(value, dict):
			value = dict(value)
			for key in ('width', 'height'):
				if isinstance(value.get(key), (int, float)):
					value[key] = max(0, int(value[key]))
		return value

	def to_attributes(self) -> WebAttributes:
		return WebAttributes(
			tag_name=self.tag_name,
			element_id=self.id,
			test_id=self.test_id,
			aria_label=self.aria_label,
			name=self.name,
			text=self.text,
			css_path=self.css_path,
		)
