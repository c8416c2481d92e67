from app_locator.scanner.service import ElementScanner, scan
from app_locator.scanner.views import ElementRecord, ScanContext, ScanResult, ScanStats

__all__ = ['ElementRecord', 'ElementScanner', 'ScanContext', 'ScanResult', 'ScanStats', 'scan']
