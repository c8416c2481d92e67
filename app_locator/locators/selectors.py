"""Selector string builders for the Appium / WebDriver locator syntaxes."""

import re

_CSS_IDENTIFIER_RE = re.compile(r'^-?[_a-zA-Z][_a-zA-Z0-9-]*$')


def _quote(value: str) -> str:
	"""Escape a value for use inside a double-quoted selector literal."""
	return value.replace('\\', '\\\\').replace('"', '\\"')


def accessibility_id(identifier: str) -> str:
	"""`~loginButton`. content-desc on Android, accessibilityIdentifier on iOS."""
	return f'~{identifier}'


def ui_automator(selector: str) -> str:
	return f'android={selector}'


def ios_class_chain(chain: str) -> str:
	return f'-ios class chain:{chain}'


def ios_predicate_string(predicate: str) -> str:
	return f'-ios predicate string:{predicate}'


def xpath(expression: str) -> str:
	return expression if expression.startswith('/') or expression.startswith('(') else f'//{expression}'


def css_id(element_id: str) -> str:
	if _CSS_IDENTIFIER_RE.match(element_id):
		return f'#{element_id}'
	return f'[id="{_quote(element_id)}"]'


def css_attribute(name: str, value: str, tag_name: str | None = None) -> str:
	return f'{tag_name or ""}[{name}="{_quote(value)}"]'


def aria_label(label: str) -> str:
	return f'aria/{label}'


def element_text(tag_name: str, text: str) -> str:
	"""WebdriverIO exact text match, e.g. `button=Login`."""
	return f'{tag_name}={text}'


class AndroidSelectors:
	@staticmethod
	def text(text: str) -> str:
		return ui_automator(f'new UiSelector().text("{_quote(text)}")')

	@staticmethod
	def text_contains(text: str) -> str:
		return ui_automator(f'new UiSelector().textContains("{_quote(text)}")')

	@staticmethod
	def resource_id(resource_id: str) -> str:
		return ui_automator(f'new UiSelector().resourceId("{_quote(resource_id)}")')

	@staticmethod
	def class_name(class_name: str) -> str:
		return ui_automator(f'new UiSelector().className("{_quote(class_name)}")')

	@staticmethod
	def description(description: str) -> str:
		return ui_automator(f'new UiSelector().description("{_quote(description)}")')

	@staticmethod
	def description_contains(description: str) -> str:
		return ui_automator(f'new UiSelector().descriptionContains("{_quote(description)}")')

	@staticmethod
	def combine(*selectors: str) -> str:
		"""Chain several UiSelector calls: combine(text('Login'), class_name('android.widget.Button'))."""
		combined = '.'.join(s.replace('android=', '', 1).replace('new UiSelector().', '', 1) for s in selectors)
		return ui_automator(f'new UiSelector().{combined}')


class IOSSelectors:
	@staticmethod
	def label(label: str) -> str:
		return ios_predicate_string(f'label == "{_quote(label)}"')

	@staticmethod
	def label_contains(label: str) -> str:
		return ios_predicate_string(f'label CONTAINS "{_quote(label)}"')

	@staticmethod
	def name(name: str) -> str:
		return ios_predicate_string(f'name == "{_quote(name)}"')

	@staticmethod
	def value(value: str) -> str:
		return ios_predicate_string(f'value == "{_quote(value)}"')

	@staticmethod
	def visible() -> str:
		return ios_predicate_string('visible == 1')

	@staticmethod
	def enabled() -> str:
		return ios_predicate_string('enabled == 1')

	@staticmethod
	def type(element_type: str) -> str:
		"""Class chain for an element type; accepts 'Button' or 'XCUIElementTypeButton'."""
		if not element_type.startswith('XCUIElementType'):
			element_type = f'XCUIElementType{element_type}'
		return ios_class_chain(f'**/{element_type}')

	@staticmethod
	def and_(*predicates: str) -> str:
		return ios_predicate_string(' AND '.join(p.replace('-ios predicate string:', '', 1) for p in predicates))

	@staticmethod
	def or_(*predicates: str) -> str:
		return ios_predicate_string(' OR '.join(p.replace('-ios predicate string:', '', 1) for p in predicates))
