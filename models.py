"""Data models for PUG View records, extraction results and errors."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Information:
    """A leaf fact attached to a section.

    PUG View has used two encodings over time. The legacy one puts the value
    directly on the entry (``StringValue``, ``NumValue``); the current one
    nests it under ``Value`` (``StringWithMarkup`` or ``Number`` lists). Both
    are accepted, legacy keys first. ``URL`` sits on the entry in both.
    """
    string_value: Optional[str] = None
    num_value: Optional[Number] = None
    url: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Information':
        """Build an entry from its decoded JSON object."""
        if not isinstance(data, dict):
            return cls()

        value = data.get('Value') if isinstance(data.get('Value'), dict) else {}

        string_value = data.get('StringValue')
        if string_value is None:
            markup = _as_list(value.get('StringWithMarkup'))
            if markup and isinstance(markup[0], dict):
                string_value = markup[0].get('String')

        num_value = data.get('NumValue')
        if num_value is None:
            numbers = _as_list(value.get('Number'))
            if numbers:
                num_value = numbers[0]

        return cls(
            string_value=string_value if isinstance(string_value, str) else None,
            num_value=num_value if _is_number(num_value) else None,
            url=data.get('URL') if isinstance(data.get('URL'), str) else None,
        )


@dataclass(frozen=True)
class Section:
    """A labelled node of the record tree."""
    heading: str
    sections: Tuple['Section', ...] = ()
    information: Tuple[Information, ...] = ()

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Section':
        """Build a section and all of its descendants."""
        if not isinstance(data, dict):
            return cls(heading="")
        heading = data.get('TOCHeading')
        return cls(
            heading=heading if isinstance(heading, str) else "",
            sections=tuple(cls.from_json(s) for s in _as_list(data.get('Section'))),
            information=tuple(
                Information.from_json(i) for i in _as_list(data.get('Information'))
            ),
        )


@dataclass(frozen=True)
class Record:
    """Root of a PUG View compound document."""
    sections: Tuple[Section, ...]
    record_number: Optional[int] = None
    record_title: Optional[str] = None

    @classmethod
    def from_json(cls, document: Any) -> 'Record':
        """
        Build a record from a decoded PUG View response body.

        Args:
            document: Decoded JSON body

        Returns:
            Parsed record

        Raises:
            SchemaError: If the body has no ``Record`` with a section list, or
                its sections nest deeper than the interpreter can parse
        """
        record = document.get('Record') if isinstance(document, dict) else None
        if not isinstance(record, dict):
            raise SchemaError("Response body has no Record object", missing="Record")

        sections = record.get('Section')
        if not isinstance(sections, list):
            raise SchemaError("Record has no Section list", missing="Record.Section")

        try:
            parsed = tuple(Section.from_json(s) for s in sections)
        except RecursionError:
            raise SchemaError("Record sections are nested too deeply", missing="Record.Section")

        return cls(
            sections=parsed,
            record_number=record.get('RecordNumber'),
            record_title=record.get('RecordTitle'),
        )


@dataclass(frozen=True)
class RelatedRecords:
    """Identifiers linked from the "Related Records" section."""
    parents: Tuple[Number, ...] = ()
    related_ids: Tuple[Tuple[str, ...], ...] = ()
    substance_ids: Tuple[Tuple[str, ...], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parents': list(self.parents),
            'relatedids': [list(ids) for ids in self.related_ids],
            'substanceids': [list(ids) for ids in self.substance_ids],
        }


@dataclass(frozen=True)
class CompoundResult:
    """Structured attributes extracted for one compound."""
    molecular_formula: str
    isomeric_smiles: str = ""
    canonical_smiles: str = ""
    inchi_key: str = ""
    inchi: str = ""
    iupac_name: str = ""
    related: RelatedRecords = field(default_factory=RelatedRecords)
    compound_id: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        """Reject results without a molecular formula."""
        if not self.molecular_formula:
            raise ExtractionError(
                "Molecular formula must not be empty",
                compound_id=self.compound_id,
                field="molecularFormula",
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form using the established output keys."""
        return {
            'molecularFormula': self.molecular_formula,
            'isomericSMILES': self.isomeric_smiles,
            'canonicalSMILES': self.canonical_smiles,
            'inChIKey': self.inchi_key,
            'inChI': self.inchi,
            'iUpacName': self.iupac_name,
            'related': self.related.to_dict(),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        if indent is None:
            return json.dumps(self.to_dict(), separators=(',', ':'))
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        return self.to_json()


class ExtractionError(Exception):
    """Raised when a compound record cannot be extracted."""

    def __init__(
        self,
        message: str,
        compound_id: Optional[int] = None,
        field: Optional[str] = None,
        path: Optional[List[str]] = None
    ):
        """
        Initialize error.

        Args:
            message: Error message
            compound_id: CID being extracted, if known
            field: Output field that could not be filled
            path: Section headings walked before the failure
        """
        self.message = message
        self.compound_id = compound_id
        self.field = field
        self.path = list(path or [])
        super().__init__(self._describe())

    def _describe(self) -> str:
        details = []
        if self.compound_id is not None:
            details.append(f"cid={self.compound_id}")
        if self.field:
            details.append(f"field={self.field}")
        if self.path:
            details.append(f"path={' > '.join(self.path)}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class TransportError(ExtractionError):
    """Raised when a document cannot be fetched or decoded."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        compound_id: Optional[int] = None
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, compound_id=compound_id)


class SchemaError(ExtractionError):
    """Raised when a required section is missing from a record."""

    def __init__(
        self,
        message: str,
        missing: Optional[str] = None,
        compound_id: Optional[int] = None,
        path: Optional[List[str]] = None
    ):
        self.missing = missing
        super().__init__(message, compound_id=compound_id, path=path)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
