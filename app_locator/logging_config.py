import logging
import sys

from app_locator.config import CONFIG

RESULT_LEVEL = 35


def addLoggingLevel(levelName: str, levelNum: int, methodName: str | None = None) -> None:
	"""
	Comprehensively adds a new logging level to the `logging` module and the
	currently configured logging class.

	Raises AttributeError if the level name is already an attribute of the
	`logging` module or if the method name is already present.
	"""
	if not methodName:
		methodName = levelName.lower()

	if hasattr(logging, levelName):
		raise AttributeError(f'{levelName} already defined in logging module')
	if hasattr(logging, methodName):
		raise AttributeError(f'{methodName} already defined in logging module')
	if hasattr(logging.getLoggerClass(), methodName):
		raise AttributeError(f'{methodName} already defined in logger class')

	def logForLevel(self, message, *args, **kwargs):
		if self.isEnabledFor(levelNum):
			self._log(levelNum, message, args, **kwargs)

	def logToRoot(message, *args, **kwargs):
		logging.log(levelNum, message, *args, **kwargs)

	logging.addLevelName(levelNum, levelName)
	setattr(logging, levelName, levelNum)
	setattr(logging.getLoggerClass(), methodName, logForLevel)
	setattr(logging, methodName, logToRoot)


def setup_logging(log_level: str | None = None, force_setup: bool = False) -> logging.Logger:
	"""Attach a single stdout handler to the `app_locator` logger.

	Levels: 'result' (only scan summaries), 'warning', 'info' (default), 'debug'.
	"""
	try:
		addLoggingLevel('RESULT', RESULT_LEVEL)
	except AttributeError:
		pass  # already registered

	log_type = (log_level or CONFIG.APP_LOCATOR_LOGGING_LEVEL).lower()
	package_logger = logging.getLogger('app_locator')

	if package_logger.handlers and not force_setup:
		return package_logger

	class AppLocatorFormatter(logging.Formatter):
		def format(self, record):
			if isinstance(record.name, str) and record.name.startswith('app_locator.'):
				record.name = record.name.split('.')[-2] if record.name.count('.') >= 2 else record.name.split('.')[-1]
			return super().format(record)

	handler = logging.StreamHandler(sys.stdout)
	if log_type == 'result':
		handler.setLevel(RESULT_LEVEL)
		handler.setFormatter(AppLocatorFormatter('%(message)s'))
	else:
		handler.setFormatter(AppLocatorFormatter('%(levelname)-8s [%(name)s] %(message)s'))

	package_logger.handlers = [handler]
	package_logger.propagate = False
	if log_type == 'result':
		package_logger.setLevel(RESULT_LEVEL)
	elif log_type == 'debug':
		package_logger.setLevel(logging.DEBUG)
	elif log_type == 'warning':
		package_logger.setLevel(logging.WARNING)
	else:
		package_logger.setLevel(logging.INFO)

	# Silence third-party chatter from the driver stacks
	for name in ('cdp_use', 'cdp_use.client', 'websockets', 'httpx', 'httpcore', 'urllib3', 'selenium', 'appium'):
		third_party = logging.getLogger(name)
		third_party.setLevel(logging.ERROR)
		third_party.propagate = False

	return package_logger
