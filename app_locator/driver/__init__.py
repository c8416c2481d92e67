from app_locator.driver.base import Driver, ElementHandle

__all__ = ['Driver', 'ElementHandle', 'AppiumDriver', 'CdpWebDriver']


def __getattr__(name: str):
	# The adapters pull in Appium / cdp_use, import them only when asked for
	if name == 'AppiumDriver':
		from app_locator.driver.appium import AppiumDriver

		return AppiumDriver
	if name == 'CdpWebDriver':
		from app_locator.driver.cdp import CdpWebDriver

		return CdpWebDriver
	raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
