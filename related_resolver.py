"""Resolution of related-compound and substance links to identifier lists."""

import random
import re
import time
from typing import Callable, List, Optional

from api_client import APIClient, is_success
from config import LINK_UID_PATTERN, RELATED_DELAY_MAX, RELATED_DELAY_MIN
from logger import LogManager

logger = LogManager().get_logger("related_resolver")

LINK_UID_RE = re.compile(LINK_UID_PATTERN, re.IGNORECASE | re.ASCII)


def scan_link_uids(text: str) -> List[str]:
    """Every ``link_uid=<digits>`` capture in order, duplicates included."""
    return LINK_UID_RE.findall(text)


class DelayPolicy:
    """Randomized pause enforced after every related-record request."""

    def __init__(
        self,
        min_delay: float = RELATED_DELAY_MIN,
        max_delay: float = RELATED_DELAY_MAX,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize delay policy.

        Args:
            min_delay: Lower bound in seconds
            max_delay: Upper bound in seconds
            sleep: Function used to wait
            rng: Random source (module-level random if omitted)

        Raises:
            ValueError: If the bounds are negative or inverted
        """
        if min_delay < 0 or max_delay < 0:
            raise ValueError(f"Delay bounds must not be negative: {min_delay}, {max_delay}")
        if min_delay > max_delay:
            raise ValueError(f"min_delay {min_delay} is greater than max_delay {max_delay}")
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.sleep = sleep
        self.rng = rng or random

    @classmethod
    def none(cls) -> 'DelayPolicy':
        """A policy that never waits."""
        return cls(0.0, 0.0)

    def next_delay(self) -> float:
        return self.rng.uniform(self.min_delay, self.max_delay)

    def pause(self) -> float:
        """Wait for a randomly chosen delay and return it."""
        delay = self.next_delay()
        if delay > 0:
            logger.debug(f"Waiting {delay:.2f}s before the next related-record request")
            self.sleep(delay)
        return delay


class RelatedIdResolver:
    """Fetches related-record pages and scrapes the identifiers they link to."""

    def __init__(
        self,
        client: Optional[APIClient] = None,
        delay_policy: Optional[DelayPolicy] = None
    ):
        self.client = client or APIClient()
        self.delay_policy = delay_policy or DelayPolicy()

    def resolve_ids(self, url: str) -> List[str]:
        """
        Fetch a listing page and collect its ``link_uid`` identifiers.

        A non-2xx response yields an empty list. The delay policy runs after
        the request whatever its outcome, and between retry attempts.

        Args:
            url: Listing page URL taken from the record

        Returns:
            Identifier strings in order of appearance

        Raises:
            TransportError: If the page could not be fetched at all
        """
        try:
            status_code, body = self.client.get_text(
                url, pause=lambda attempt: self.delay_policy.pause()
            )
        finally:
            self.delay_policy.pause()

        if not is_success(status_code):
            logger.warning(f"Related-record page {url} returned {status_code}; no identifiers")
            return []

        ids = scan_link_uids(body)
        logger.debug(f"Found {len(ids)} identifiers at {url}")
        return ids
