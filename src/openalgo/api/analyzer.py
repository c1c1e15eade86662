"""
OpenAlgo REST API - Analyzer Methods

Analyzer mode routes orders to a simulated sandbox instead of the broker.
"""

from typing import Any, Dict

from .base import BaseAPI


class AnalyzerAPI(BaseAPI):

    def analyzer_status(self) -> Dict[str, Any]:
        """Analyzer mode flag and log statistics"""
        return self.submit_request('analyzer', self._payload())

    def analyzer_toggle(self, *, mode: bool) -> Dict[str, Any]:
        """Enable (True) or disable (False) analyzer mode"""
        return self.submit_request('analyzer/toggle', self._payload(mode=bool(mode)))
