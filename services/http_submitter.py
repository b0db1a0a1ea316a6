# -*- coding: utf-8 -*-
"""
HTTP submit collaborator.

Posts the accumulated form values as JSON and classifies failures as
retryable (network, timeout, 408/429/5xx) or terminal (other 4xx).
"""

import asyncio
import json
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional

import requests

from services.exceptions import TerminalSubmissionError, TransientSubmissionError
from utils.logger import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


def to_json_value(value: Any) -> Any:
    """Convert a form value (date, file handle, sequence...) to something JSON can carry."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_value(v) for v in value]
    # File handles: send the name, the upload itself is someone else's job
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return str(value)


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


class HttpSubmitter:
    """
    Submits form values to an HTTP endpoint.

    Usage:
        submitter = HttpSubmitter("https://example.org/api/v1/signups")
        payload = await submitter(values)
    """

    def __init__(self, url: str, timeout: Optional[float] = None, method: str = "POST",
                 headers: Optional[Dict[str, str]] = None, verify: bool = True):
        if timeout is None:
            from app.config import Config
            timeout = Config.SUBMIT_TIMEOUT

        self.url = url
        self.timeout = timeout
        self.method = method.upper()
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self.headers.update(headers or {})
        self.verify = verify

    async def __call__(self, values: Mapping[str, Any]) -> Any:
        """Send ``values`` without blocking the event loop."""
        body = to_json_value(dict(values))
        return await asyncio.to_thread(self._send, body)

    def _send(self, body: Dict[str, Any]) -> Any:
        """
        Execute the HTTP request.

        Returns:
            Response JSON data (empty dict for an empty body)

        Raises:
            TransientSubmissionError: network error, timeout or retryable status
            TerminalSubmissionError: any other non-2xx status
        """
        logger.info(f"[SUBMIT REQ] {self.method} {self.url}")
        logger.debug(f"[SUBMIT REQ] Body: {json.dumps(body, ensure_ascii=False, default=str)}")

        try:
            response = requests.request(
                method=self.method,
                url=self.url,
                json=body,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify,
            )
            response.raise_for_status()

            logger.info(f"[SUBMIT RES] {response.status_code} {self.url}")
            if not response.text:
                return {}
            try:
                return response.json()
            except ValueError:
                return {"raw": response.text}

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except (ValueError, AttributeError):
                pass
            logger.error(f"[SUBMIT ERR] {status_code} {self.method} {self.url} | Response: {response_data}")

            error_cls = TransientSubmissionError if is_retryable_status(status_code) else TerminalSubmissionError
            raise error_cls(
                message=str(e),
                status_code=status_code,
                response_data=response_data if isinstance(response_data, dict) else {"body": response_data},
                context="submit",
            ) from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Submit timed out: {self.url} - {e}")
            raise TransientSubmissionError(
                message=f"timeout: {e}",
                original_error=e,
                context="submit",
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error: {self.url} - {e}")
            raise TransientSubmissionError(
                message=str(e),
                original_error=e,
                context="submit",
            ) from e
