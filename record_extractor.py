"""Extraction of structured compound attributes from PUG View records."""

from typing import Dict, List, Optional

from api_client import APIClient
from config import (COMPUTED_DESCRIPTORS, DESCRIPTOR_POSITIONS, MOLECULAR_FORMULA,
                    NAMES_AND_IDENTIFIERS, PARENT_COMPOUND, PUBCHEM_VIEW_URL,
                    RELATED_COMPOUNDS, RELATED_RECORDS, SUBSTANCES)
from logger import LogManager
from models import (CompoundResult, ExtractionError, Record, RelatedRecords,
                    SchemaError, Section)
from related_resolver import DelayPolicy, RelatedIdResolver
from section_locator import find_section, first_information, section_at


class CompoundExtractor:
    """Looks up one compound at a time and assembles its CompoundResult."""

    def __init__(
        self,
        client: Optional[APIClient] = None,
        resolver: Optional[RelatedIdResolver] = None,
        delay_policy: Optional[DelayPolicy] = None,
        view_url: str = PUBCHEM_VIEW_URL
    ):
        """
        Initialize extractor.

        Args:
            client: HTTP client for the record fetch
            resolver: Resolver for related-record links (built on ``client``
                with ``delay_policy`` if omitted)
            delay_policy: Pause between related-record requests
            view_url: Record URL template with a ``{cid}`` placeholder
        """
        self.client = client or APIClient()
        self.resolver = resolver or RelatedIdResolver(self.client, delay_policy)
        self.view_url = view_url
        self.logger = LogManager().get_logger("record_extractor")

    def record_url(self, compound_id: int) -> str:
        return self.view_url.format(cid=compound_id)

    def extract(self, compound_id: int) -> CompoundResult:
        """
        Fetch a compound record and extract its attributes.

        Args:
            compound_id: PubChem CID

        Returns:
            Extracted compound attributes

        Raises:
            ValueError: If compound_id is not a positive integer
            TransportError: If the record cannot be fetched or decoded
            SchemaError: If "Names and Identifiers" is missing
            ExtractionError: If the molecular formula is missing or empty
        """
        if isinstance(compound_id, bool) or not isinstance(compound_id, int) or compound_id < 1:
            raise ValueError(f"Compound id must be a positive integer, got {compound_id!r}")

        self.logger.info(f"Extracting compound {compound_id}")
        document = self.client.get_json(self.record_url(compound_id))
        record = Record.from_json(document)
        result = self.extract_record(record, compound_id)
        self.logger.info(
            f"Extracted compound {compound_id}: {result.molecular_formula}"
        )
        return result

    def extract_record(self, record: Record, compound_id: Optional[int] = None) -> CompoundResult:
        """Extract attributes from an already parsed record."""
        names = find_section(record.sections, NAMES_AND_IDENTIFIERS)
        if names is None:
            raise SchemaError(
                f"Section '{NAMES_AND_IDENTIFIERS}' not found",
                missing=NAMES_AND_IDENTIFIERS,
                compound_id=compound_id
            )

        molecular_formula = self._molecular_formula(record, names, compound_id)
        descriptors = self._descriptors(names)

        return CompoundResult(
            molecular_formula=molecular_formula,
            related=self._related_records(record),
            compound_id=compound_id,
            **descriptors
        )

    def _molecular_formula(
        self,
        record: Record,
        names: Section,
        compound_id: Optional[int]
    ) -> str:
        path = [NAMES_AND_IDENTIFIERS, MOLECULAR_FORMULA]
        info = first_information(find_section(names.sections, MOLECULAR_FORMULA))
        formula = info.string_value if info else None
        if not formula:
            self.logger.debug("Record without molecular formula: %r", record)
            raise ExtractionError(
                "Could not read molecular formula",
                compound_id=compound_id,
                field="molecularFormula",
                path=path
            )
        return formula

    def _descriptors(self, names: Section) -> Dict[str, str]:
        """Read the positional children of "Computed Descriptors"."""
        computed = find_section(names.sections, COMPUTED_DESCRIPTORS)
        children = computed.sections if computed else ()

        values = {}
        for name, position in DESCRIPTOR_POSITIONS.items():
            info = first_information(section_at(children, position))
            values[name] = (info.string_value if info else None) or ""
        return values

    def _related_records(self, record: Record) -> RelatedRecords:
        related = find_section(record.sections, RELATED_RECORDS)
        if related is None:
            return RelatedRecords()

        parents = []
        related_ids: List[tuple] = []
        substance_ids: List[tuple] = []

        for subsection in related.sections:
            if subsection.heading == PARENT_COMPOUND:
                info = first_information(subsection)
                if info and info.num_value is not None:
                    parents.append(info.num_value)
                else:
                    self.logger.warning("Parent compound entry without a numeric value")

            elif subsection.heading == RELATED_COMPOUNDS:
                url = self._link(first_information(subsection), RELATED_COMPOUNDS)
                if url:
                    related_ids.append(tuple(self.resolver.resolve_ids(url)))

            elif subsection.heading == SUBSTANCES:
                # Only the first link subsection is followed
                link_section = section_at(subsection.sections, 0)
                url = self._link(first_information(link_section), SUBSTANCES)
                if url:
                    substance_ids.append(tuple(self.resolver.resolve_ids(url)))

        return RelatedRecords(
            parents=tuple(parents),
            related_ids=tuple(related_ids),
            substance_ids=tuple(substance_ids)
        )

    def _link(self, info, heading: str) -> Optional[str]:
        if info is None or not info.url:
            self.logger.warning(f"'{heading}' entry has no URL; skipping")
            return None
        return info.url


def fetch_compound(compound_id: int, **kwargs) -> CompoundResult:
    """Extract one compound with a freshly built extractor."""
    extractor = CompoundExtractor(**kwargs)
    try:
        return extractor.extract(compound_id)
    finally:
        if 'client' not in kwargs:
            extractor.client.close()
