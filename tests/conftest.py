"""Shared fixtures: PUG View document builders and a fake HTTP session."""

import json
from typing import Any, Dict, List, Optional

import pytest

from api_client import APIClient
from related_resolver import DelayPolicy

VIEW_URL = "https://pubchem.test/rest/pug_view/data/compound/{cid}/JSON/?"


def section(heading: str, sections: Optional[list] = None,
            information: Optional[list] = None) -> Dict[str, Any]:
    node = {'TOCHeading': heading}
    if sections is not None:
        node['Section'] = sections
    if information is not None:
        node['Information'] = information
    return node


def string_info(value: str) -> Dict[str, Any]:
    return {'ReferenceNumber': 1, 'StringValue': value}


def record_document(sections: list, cid: int = 2244) -> Dict[str, Any]:
    return {'Record': {'RecordType': 'CID', 'RecordNumber': cid, 'Section': sections}}


def names_section(formula: Optional[str] = "C9H8O4",
                  descriptors: Optional[List[str]] = None,
                  extra: Optional[list] = None) -> Dict[str, Any]:
    children = list(extra or [])
    if formula is not None:
        children.append(section("Molecular Formula", information=[string_info(formula)]))
    if descriptors is not None:
        children.append(section("Computed Descriptors", sections=[
            section(f"Descriptor {i}", information=[string_info(value)])
            for i, value in enumerate(descriptors)
        ]))
    return section("Names and Identifiers", sections=children)


ASPIRIN_DESCRIPTORS = [
    "2-acetyloxybenzoic acid",
    "InChI=1S/C9H8O4/c1-6(10)13-8-5-3-2-4-7(8)9(11)12/h2-5H,1H3,(H,11,12)",
    "BSYNRYMUTXBXSQ-UHFFFAOYSA-N",
    "CC(=O)OC1=CC=CC=C1C(=O)O",
    "CC(=O)OC1=CC=CC=C1C(=O)O",
]


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)


def json_response(document: Any, status_code: int = 200) -> FakeResponse:
    return FakeResponse(status_code, json.dumps(document))


class FakeSession:
    """Answers GETs from a URL map; a list value is consumed one item per call."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({'url': url, 'headers': headers, 'timeout': timeout})
        answer = self.routes.get(url, FakeResponse(404, "not found"))
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self):
        self.closed = True

    @property
    def urls(self) -> List[str]:
        return [call['url'] for call in self.calls]


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    return APIClient(session=fake_session, timeout=5, max_retries=2, retry_delay=0)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def no_delay():
    return DelayPolicy.none()
