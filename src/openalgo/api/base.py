"""
OpenAlgo REST API - Base Client
===============================

Single POST entry point shared by every REST endpoint group. Transport
failures come back as structured error results instead of exceptions.
"""

import json
import re
from typing import Any, Dict, Mapping, Optional

import requests
from loguru import logger

from ..utils.config import config

_CAMEL_BOUNDARY = re.compile(r'([A-Z])')


def to_api_key(name: str) -> str:
    """camelCase parameter name to the API's snake_case key"""
    return _CAMEL_BOUNDARY.sub(r'_\1', name).lower()


def stringify(value: Any) -> Any:
    """Numbers travel as strings in request payloads"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def merge_params(payload: Dict[str, Any], params: Mapping[str, Any]) -> Dict[str, Any]:
    """Add optional parameters, skipping None and normalising keys and numbers"""
    for key, value in params.items():
        if value is not None:
            payload[to_api_key(key)] = stringify(value)
    return payload


class BaseAPI:
    """
    REST client base for OpenAlgo endpoint groups.

    Args:
        api_key: API key, embedded in every payload as ``apikey``
        host: Server URL, e.g. ``http://127.0.0.1:5000``
        version: API version segment
        timeout: Request timeout in seconds
        session: Optional shared requests.Session
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 host: Optional[str] = None,
                 version: Optional[str] = None,
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        settings = config.api
        self.api_key = api_key or settings.api_key
        self.host = (host or settings.host).rstrip('/')
        self.version = version or settings.version
        self.base_url = f"{self.host}/api/{self.version}/"
        self.timeout = timeout or settings.timeout
        self.default_strategy = settings.strategy

        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}'
        })

    def _payload(self, **fields) -> Dict[str, Any]:
        payload = {'apikey': self.api_key}
        payload.update(fields)
        return payload

    def submit_request(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST payload to endpoint and return the decoded JSON body.

        On failure returns ``{"status": "error", "message": ..., "error_type": ...}``
        where error_type is ``http_error`` (server answered non-2xx),
        ``network_error`` (no response), ``invalid_response`` (body is not
        JSON) or ``request_setup_error`` (request could not be built).
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Sending request to: {url}")

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code
            try:
                body = json.dumps(e.response.json())
            except ValueError:
                body = e.response.text
            logger.error(f"Error response from {url}: {status_code} {body}")
            return {
                'status': 'error',
                'message': f"HTTP {status_code}: {body}",
                'code': status_code,
                'error_type': 'http_error'
            }

        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"No response received from {url}: {e}")
            return {
                'status': 'error',
                'message': 'No response received from server',
                'error_type': 'network_error'
            }

        except requests.exceptions.JSONDecodeError as e:
            logger.error(f"Invalid JSON in response from {url}: {e}")
            return {
                'status': 'error',
                'message': f"Invalid JSON in response: {e}",
                'error_type': 'invalid_response'
            }

        except (requests.exceptions.RequestException, TypeError, ValueError) as e:
            logger.error(f"Request to {url} could not be sent: {e}")
            return {
                'status': 'error',
                'message': str(e),
                'error_type': 'request_setup_error'
            }

    def close(self) -> None:
        self.session.close()
