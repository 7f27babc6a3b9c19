"""HTTP client for PubChem requests with timeouts and retry."""

import time
from typing import Any, Callable, Optional, Tuple

import requests
from requests.exceptions import RequestException

from config import (HTML_HEADERS, JSON_HEADERS, MAX_RETRIES, REQUEST_TIMEOUT,
                    RETRY_DELAY, USER_AGENT)
from logger import LogManager
from models import TransportError


def is_success(status_code: int) -> bool:
    """Check for a 2xx status code."""
    return 200 <= status_code < 300


class APIClient:
    """Synchronous HTTP client shared by the primary and secondary fetches."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY
    ):
        """
        Initialize API client.

        Args:
            session: Session to send requests with (a new one if omitted)
            timeout: Seconds before a single request is abandoned
            max_retries: Attempts per request, including the first
            retry_delay: Base pause between attempts, scaled by attempt number
        """
        if session is None:
            session = requests.Session()
            session.headers.update({'User-Agent': USER_AGENT})
        self.session = session
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = LogManager().get_logger("api_client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def _backoff(self, attempt: int) -> None:
        time.sleep(self.retry_delay * attempt)

    def _send(
        self,
        url: str,
        headers: dict,
        pause: Optional[Callable[[int], None]] = None
    ) -> requests.Response:
        """
        Send a GET request, retrying connection errors, timeouts and 5xx.

        Args:
            url: Absolute URL to fetch
            headers: Request headers
            pause: Called with the attempt number between attempts
                (defaults to linear backoff)

        Returns:
            The last response received

        Raises:
            TransportError: If no response was received on any attempt
        """
        pause = pause or self._backoff
        last_error: Optional[RequestException] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                self.logger.debug(f"GET {url} (attempt {attempt}/{self.max_retries})")
                response = self.session.get(url, headers=headers, timeout=self.timeout)
            except RequestException as e:
                last_error = e
                self.logger.warning(
                    f"Request to {url} failed (attempt {attempt}/{self.max_retries}): {str(e)}"
                )
            else:
                if response.status_code < 500 or attempt == self.max_retries:
                    return response
                self.logger.warning(
                    f"Server error {response.status_code} from {url} "
                    f"(attempt {attempt}/{self.max_retries})"
                )

            if attempt < self.max_retries:
                pause(attempt)

        raise TransportError(
            f"Request failed after {self.max_retries} attempts: {str(last_error)}",
            url=url
        )

    def get_json(self, url: str) -> Any:
        """
        Fetch and decode a JSON document.

        Args:
            url: Absolute URL to fetch

        Returns:
            Decoded JSON body

        Raises:
            TransportError: On network failure, non-2xx status or malformed JSON
        """
        response = self._send(url, JSON_HEADERS)
        if not is_success(response.status_code):
            raise TransportError(
                f"Unexpected status {response.status_code}",
                url=url,
                status_code=response.status_code
            )
        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            raise TransportError(
                f"Malformed JSON body: {str(e)}",
                url=url,
                status_code=response.status_code
            ) from e

    def get_text(
        self,
        url: str,
        pause: Optional[Callable[[int], None]] = None
    ) -> Tuple[int, str]:
        """
        Fetch a page as text without judging its status.

        Args:
            url: Absolute URL to fetch
            pause: Called between retry attempts

        Returns:
            Tuple of (status code, body text)
        """
        response = self._send(url, HTML_HEADERS, pause=pause)
        return response.status_code, response.text
