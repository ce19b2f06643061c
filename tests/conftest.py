import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure repo root is on sys.path so `import partyintel` works under all pytest import modes.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from partyintel.core.models import ValidatorRecord  # noqa: E402
from partyintel.upstream.client import ParticipantLookup  # noqa: E402


def license_item(
    validator: str,
    sponsor: str,
    *,
    last_active_at: str = "2025-06-01T12:00:00.000000Z",
    version: Optional[str] = "0.4.1",
    contact: Optional[str] = None,
    last_round: Optional[str] = None,
) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}
    if version is not None:
        metadata["version"] = version
    if contact is not None:
        metadata["contactPoint"] = contact
    payload: Dict[str, Any] = {
        "validator": validator,
        "sponsor": sponsor,
        "lastActiveAt": last_active_at,
        "metadata": metadata,
    }
    if last_round is not None:
        payload["faucetState"] = {
            "firstReceivedFor": {"number": "1"},
            "lastReceivedFor": {"number": last_round},
            "numCouponsMissed": "0",
        }
    return {
        "contract_id": f"cid-{validator}",
        "created_at": "2025-01-01T00:00:00.000000Z",
        "payload": payload,
    }


class FakeCantonClient:
    """Stands in for CantonNodesClient: fixed validator list, scripted participant ids."""

    api_url = "https://api.cantonnodes.test"

    def __init__(self, items: List[Dict[str, Any]], participants: Optional[Dict[str, str]] = None):
        self.items = items
        self.participants = participants or {}
        self.fetch_calls = 0
        self.lookup_calls: List[str] = []

    def fetch_validator_licenses(self) -> List[ValidatorRecord]:
        self.fetch_calls += 1
        return [ValidatorRecord.from_license(i) for i in self.items]

    def lookup_participant_id(self, party_id: str) -> ParticipantLookup:
        self.lookup_calls.append(party_id)
        pid = self.participants.get(party_id)
        if pid is None:
            return ParticipantLookup(status="not_found")
        return ParticipantLookup(status="success", participant_id=pid)


@pytest.fixture
def license_factory():
    return license_item


@pytest.fixture
def fake_client_factory():
    return FakeCantonClient
