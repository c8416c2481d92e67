# @file purpose: Decides which page source nodes are worth generating locators for
"""
Structural element classification for native page sources.

Works purely on the static snapshot: a node is kept when it is interactable
(known widget tag, or an interaction flag such as clickable="true") or when it
carries visible content without being a bare layout wrapper. Live checks such as
isDisplayed() belong to the scanner, not here.
"""

from app_locator.locators.views import FilterPolicy, NormalizedNode, Platform
from app_locator.utils import is_valid

ANDROID_INTERACTABLE_TAGS = frozenset(
	{
		# Text input
		'android.widget.EditText',
		'android.widget.AutoCompleteTextView',
		'android.widget.MultiAutoCompleteTextView',
		'android.widget.SearchView',
		# Buttons
		'android.widget.Button',
		'android.widget.ImageButton',
		'android.widget.ToggleButton',
		'android.widget.CompoundButton',
		'android.widget.RadioButton',
		'android.widget.CheckBox',
		'android.widget.Switch',
		'android.widget.CheckedTextView',
		# Pickers and sliders
		'android.widget.Spinner',
		'android.widget.SeekBar',
		'android.widget.RatingBar',
		'android.widget.NumberPicker',
		'android.widget.DatePicker',
		'android.widget.TimePicker',
		# Navigation
		'android.widget.TabWidget',
		'com.google.android.material.tabs.TabLayout$TabView',
		'com.google.android.material.bottomnavigation.BottomNavigationItemView',
		'androidx.appcompat.widget.SwitchCompat',
		'com.google.android.material.switchmaterial.SwitchMaterial',
		'com.google.android.material.button.MaterialButton',
		'com.google.android.material.floatingactionbutton.FloatingActionButton',
		'android.webkit.WebView',
	}
)

ANDROID_LAYOUT_CONTAINERS = frozenset(
	{
		'hierarchy',
		'android.widget.FrameLayout',
		'android.widget.LinearLayout',
		'android.widget.RelativeLayout',
		'android.widget.GridLayout',
		'android.widget.TableLayout',
		'android.widget.TableRow',
		'android.widget.AbsoluteLayout',
		'android.widget.ScrollView',
		'android.widget.HorizontalScrollView',
		'android.widget.ListView',
		'android.widget.GridView',
		'android.view.View',
		'android.view.ViewGroup',
		'androidx.constraintlayout.widget.ConstraintLayout',
		'androidx.coordinatorlayout.widget.CoordinatorLayout',
		'androidx.drawerlayout.widget.DrawerLayout',
		'androidx.recyclerview.widget.RecyclerView',
		'androidx.viewpager.widget.ViewPager',
		'androidx.cardview.widget.CardView',
		'android.support.v7.widget.RecyclerView',
	}
)

IOS_INTERACTABLE_TAGS = frozenset(
	{
		'XCUIElementTypeButton',
		'XCUIElementTypeTextField',
		'XCUIElementTypeSecureTextField',
		'XCUIElementTypeTextView',
		'XCUIElementTypeSearchField',
		'XCUIElementTypeSwitch',
		'XCUIElementTypeToggle',
		'XCUIElementTypeSlider',
		'XCUIElementTypeStepper',
		'XCUIElementTypeSegmentedControl',
		'XCUIElementTypePicker',
		'XCUIElementTypePickerWheel',
		'XCUIElementTypeDatePicker',
		'XCUIElementTypeLink',
		'XCUIElementTypeCell',
		'XCUIElementTypeMenuItem',
		'XCUIElementTypeCheckBox',
		'XCUIElementTypeRadioButton',
		'XCUIElementTypeKey',
		'XCUIElementTypeTab',
		'XCUIElementTypePageIndicator',
	}
)

IOS_LAYOUT_CONTAINERS = frozenset(
	{
		'AppiumAUT',
		'XCUIElementTypeApplication',
		'XCUIElementTypeWindow',
		'XCUIElementTypeOther',
		'XCUIElementTypeGroup',
		'XCUIElementTypeLayoutArea',
		'XCUIElementTypeLayoutItem',
		'XCUIElementTypeScrollView',
		'XCUIElementTypeTable',
		'XCUIElementTypeCollectionView',
		'XCUIElementTypeNavigationBar',
		'XCUIElementTypeTabBar',
		'XCUIElementTypeToolbar',
		'XCUIElementTypeStatusBar',
		'XCUIElementTypeKeyboard',
	}
)

ANDROID_INTERACTABLE_ATTRIBUTES = ('clickable', 'long-clickable', 'focusable', 'checkable', 'scrollable')
IOS_INTERACTABLE_ATTRIBUTES = ('accessible', 'enabled')

ANDROID_CONTENT_ATTRIBUTES = ('text', 'content-desc')
IOS_CONTENT_ATTRIBUTES = ('label', 'name', 'value')


def get_default_filters(platform: Platform | str, **overrides) -> FilterPolicy:
	"""Default filter policy for a native platform; keyword overrides replace individual options."""
	platform = Platform.from_value(platform)
	if platform == Platform.ANDROID:
		defaults = dict(
			interactable_tags=ANDROID_INTERACTABLE_TAGS,
			layout_containers=ANDROID_LAYOUT_CONTAINERS,
			interactable_attributes=ANDROID_INTERACTABLE_ATTRIBUTES,
			content_attributes=ANDROID_CONTENT_ATTRIBUTES,
			visibility_attribute='displayed',
		)
	elif platform == Platform.IOS:
		defaults = dict(
			interactable_tags=IOS_INTERACTABLE_TAGS,
			layout_containers=IOS_LAYOUT_CONTAINERS,
			interactable_attributes=IOS_INTERACTABLE_ATTRIBUTES,
			content_attributes=IOS_CONTENT_ATTRIBUTES,
			visibility_attribute='visible',
		)
	else:
		raise ValueError(f'No structural filter policy for platform {platform.value!r}')

	defaults.update(overrides)
	return FilterPolicy(platform=platform, **defaults)


def _policy_for(platform: Platform | str, policy: FilterPolicy | None) -> FilterPolicy:
	return policy if policy is not None else get_default_filters(platform)


def _is_true(value: str | None) -> bool:
	return value is not None and value.strip().lower() == 'true'


def build_interactable_query(platform: Platform | str, policy: FilterPolicy | None = None) -> str:
	"""
	Coarse XPath the driver evaluates to pre-select interactable elements, e.g.
	//*[@clickable="true" or @long-clickable="true" or ...]
	"""
	policy = _policy_for(platform, policy)
	predicates = ' or '.join(f'@{name}="true"' for name in policy.interactable_attributes)
	return f'//*[{predicates}]' if predicates else '//*'


def is_interactable_element(node: NormalizedNode, platform: Platform | str, policy: FilterPolicy | None = None) -> bool:
	policy = _policy_for(platform, policy)
	if node.tag_name in policy.interactable_tags:
		return True
	return any(_is_true(node.attributes.get(name)) for name in policy.interactable_attributes)


def has_meaningful_content(node: NormalizedNode, platform: Platform | str, policy: FilterPolicy | None = None) -> bool:
	policy = _policy_for(platform, policy)
	return any(is_valid(node.attributes.get(name)) for name in policy.content_attributes)


def is_layout_container(node: NormalizedNode, platform: Platform | str, policy: FilterPolicy | None = None) -> bool:
	policy = _policy_for(platform, policy)
	return node.tag_name in policy.layout_containers and not has_meaningful_content(node, platform, policy)


def _passes_policy_options(node: NormalizedNode, policy: FilterPolicy) -> bool:
	if node.tag_name in policy.exclude_tag_names:
		return False
	if policy.include_tag_names is not None and node.tag_name not in policy.include_tag_names:
		return False
	if any(not is_valid(node.attributes.get(name)) for name in policy.require_attributes):
		return False
	if policy.min_attribute_count and sum(1 for value in node.attributes.values() if is_valid(value)) < policy.min_attribute_count:
		return False
	if policy.visible_only and policy.visibility_attribute:
		# Absent visibility info counts as visible
		visibility = node.attributes.get(policy.visibility_attribute)
		if visibility is not None and not _is_true(visibility):
			return False
	return True


def should_include_element(node: NormalizedNode, platform: Platform | str, policy: FilterPolicy | None = None) -> bool:
	"""
	Whether locators should be generated for this node.

	Default rule: include interactable nodes, plus nodes that are not layout
	containers but carry meaningful content. Structural wrappers are dropped
	unless they carry visible content themselves.
	"""
	policy = _policy_for(platform, policy)

	if not node.tag_name or not _passes_policy_options(node, policy):
		return False

	if is_interactable_element(node, platform, policy):
		return True
	if policy.interactable_only:
		return False
	if policy.include_layout_containers and node.tag_name in policy.layout_containers:
		return True
	return not is_layout_container(node, platform, policy) and has_meaningful_content(node, platform, policy)


def classify(node: NormalizedNode, platform: Platform | str, policy: FilterPolicy | None = None) -> bool:
	return should_include_element(node, platform, policy)
