from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from partyintel.core.models import ValidatorRecord
from partyintel.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

LookupStatus = Literal["success", "not_found", "error"]


@dataclass(frozen=True)
class ParticipantLookup:
    status: LookupStatus
    participant_id: Optional[str] = None


class CantonNodesClient:
    """Read-only client for the CantonNodes scan API."""

    def __init__(
        self,
        api_url: str,
        domain_id: str,
        *,
        timeout_s: float = 10.0,
        validator_limit: Optional[int] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.domain_id = domain_id
        self.timeout_s = timeout_s
        self.validator_limit = validator_limit

    def fetch_validator_licenses(self) -> List[ValidatorRecord]:
        """Fetch the full validator license list.

        Raises UpstreamUnavailable on transport errors, non-2xx statuses and
        bodies without a `validator_licenses` list.
        """
        params: Dict[str, Any] = {}
        if self.validator_limit:
            params["limit"] = int(self.validator_limit)

        url = f"{self.api_url}/v0/admin/validator/licenses"
        try:
            r = requests.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout_s,
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamUnavailable(f"validator registry request failed: {exc}") from exc

        licenses = data.get("validator_licenses") if isinstance(data, dict) else None
        if not isinstance(licenses, list):
            raise UpstreamUnavailable("validator registry returned an unexpected body")

        out: List[ValidatorRecord] = []
        skipped = 0
        for item in licenses:
            if not isinstance(item, dict):
                skipped += 1
                continue
            try:
                out.append(ValidatorRecord.from_license(item))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning("Skipped %d malformed validator license entries", skipped)
        return out

    def lookup_participant_id(self, party_id: str) -> ParticipantLookup:
        """Best-effort participant id lookup; never raises."""
        url = (
            f"{self.api_url}/v0/domains/{self.domain_id}"
            f"/parties/{quote(party_id, safe='')}/participant-id"
        )
        try:
            r = requests.get(url, headers={"Accept": "application/json"}, timeout=self.timeout_s)
        except requests.RequestException as exc:
            logger.debug("Participant lookup for %s failed: %s", party_id, exc)
            return ParticipantLookup(status="error")

        if not r.ok:
            return ParticipantLookup(status="not_found")
        try:
            data = r.json()
        except ValueError:
            return ParticipantLookup(status="error")

        participant_id = data.get("participant_id") if isinstance(data, dict) else None
        if not participant_id:
            return ParticipantLookup(status="not_found")
        return ParticipantLookup(status="success", participant_id=str(participant_id))
