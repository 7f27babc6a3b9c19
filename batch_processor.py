"""Parallel extraction of many compounds."""

import concurrent.futures
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from tqdm import tqdm

from api_client import APIClient
from config import MAX_WORKERS
from logger import LogManager
from models import CompoundResult
from record_extractor import CompoundExtractor
from related_resolver import DelayPolicy


@dataclass
class BatchResult:
    """Outcome of a batch, keyed by CID."""
    results: Dict[int, CompoundResult] = field(default_factory=dict)
    errors: Dict[int, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class BatchProcessor:
    """Runs independent extractions on a thread pool.

    Each task builds its own extractor and HTTP session, so extractions share
    no state. Related-record requests inside one extraction stay sequential
    and throttled by that extractor's delay policy.
    """

    def __init__(
        self,
        max_workers: int = MAX_WORKERS,
        delay_policy_factory: Optional[Callable[[], DelayPolicy]] = None,
        extractor_factory: Optional[Callable[[], CompoundExtractor]] = None,
        show_progress: bool = True
    ):
        """
        Initialize batch processor.

        Args:
            max_workers: Number of extractions running at once
            delay_policy_factory: Builds a delay policy for each extraction
            extractor_factory: Builds the extractor used by each task
                (overrides ``delay_policy_factory``)
            show_progress: Display a progress bar
        """
        self.max_workers = max(1, max_workers)
        self.delay_policy_factory = delay_policy_factory or DelayPolicy
        self.extractor_factory = extractor_factory
        self.show_progress = show_progress
        self.logger = LogManager().get_logger("batch_processor")

    def _extract_one(self, compound_id: int) -> CompoundResult:
        if self.extractor_factory is not None:
            return self.extractor_factory().extract(compound_id)

        with APIClient() as client:
            extractor = CompoundExtractor(
                client=client, delay_policy=self.delay_policy_factory()
            )
            return extractor.extract(compound_id)

    def extract_many(self, compound_ids: Iterable[int]) -> BatchResult:
        """
        Extract a set of compounds in parallel.

        Args:
            compound_ids: CIDs to extract (duplicates are extracted once)

        Returns:
            Results and per-CID errors
        """
        compound_ids: List[int] = list(dict.fromkeys(compound_ids))
        batch = BatchResult()

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_cid = {
                executor.submit(self._extract_one, cid): cid
                for cid in compound_ids
            }

            progress = tqdm(
                total=len(future_to_cid),
                desc="Extracting compounds",
                unit="cid",
                disable=not self.show_progress
            )
            for future in concurrent.futures.as_completed(future_to_cid):
                cid = future_to_cid[future]
                try:
                    batch.results[cid] = future.result()
                except Exception as e:
                    self.logger.error(f"Error extracting compound {cid}: {str(e)}")
                    batch.errors[cid] = e
                progress.update(1)
            progress.close()

        if batch.errors:
            self.logger.warning(
                f"Failed to extract {len(batch.errors)} of {len(compound_ids)} compounds:"
                f"\n" + "\n".join(
                    f"- {cid}: {e}" for cid, e in batch.errors.items()
                )
            )

        return batch
