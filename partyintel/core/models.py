"""
Validator license records as served by the CantonNodes registry.

Upstream item shape (only the fields we read):

    {
      "contract_id": "00ab...",
      "created_at": "2025-01-01T00:00:00.000000Z",
      "payload": {
        "validator": "acme-validator-1::1220...",
        "sponsor": "Cumberland-1::1220...",
        "lastActiveAt": "2025-06-01T12:00:00.000000Z",
        "metadata": {"version": "0.4.1", "contactPoint": "ops@acme.io", "lastUpdatedAt": "..."},
        "faucetState": {
          "firstReceivedFor": {"number": "10"},
          "lastReceivedFor": {"number": "42"},
          "numCouponsMissed": "0"
        }
      }
    }
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ValidatorMetadata(CamelModel):
    version: Optional[str] = None
    contact_point: Optional[str] = None
    last_updated_at: Optional[str] = None


class FaucetState(CamelModel):
    first_received_round: Optional[str] = None
    last_received_round: Optional[str] = None
    coupons_missed: Optional[str] = None


class ValidatorRecord(CamelModel):
    validator_party_id: str = Field(min_length=1)
    sponsor_party_id: str = Field(min_length=1)
    last_active_at: Optional[str] = None
    metadata: Optional[ValidatorMetadata] = None
    faucet_state: Optional[FaucetState] = None

    # Provenance, passed through untouched.
    contract_id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def version(self) -> Optional[str]:
        return self.metadata.version if self.metadata else None

    @classmethod
    def from_license(cls, item: Mapping[str, Any]) -> "ValidatorRecord":
        """Build a record from one `validator_licenses[]` entry.

        Raises pydantic.ValidationError when the validator or sponsor id is
        missing, including when `payload` is not an object.
        """
        payload = item.get("payload")
        if not isinstance(payload, Mapping):
            payload = {}
        metadata = payload.get("metadata")
        faucet = payload.get("faucetState")

        return cls(
            validator_party_id=payload.get("validator") or "",
            sponsor_party_id=payload.get("sponsor") or "",
            last_active_at=_opt_str(payload.get("lastActiveAt")),
            metadata=_metadata(metadata) if isinstance(metadata, Mapping) else None,
            faucet_state=_faucet(faucet) if isinstance(faucet, Mapping) else None,
            contract_id=item.get("contract_id"),
            created_at=item.get("created_at"),
        )


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _round_number(value: Any) -> Optional[str]:
    # Rounds arrive wrapped as {"number": "123"}.
    if isinstance(value, Mapping):
        value = value.get("number")
    return _opt_str(value)


def _metadata(raw: Mapping[str, Any]) -> ValidatorMetadata:
    return ValidatorMetadata(
        version=_opt_str(raw.get("version")),
        contact_point=_opt_str(raw.get("contactPoint")),
        last_updated_at=_opt_str(raw.get("lastUpdatedAt")),
    )


def _faucet(raw: Mapping[str, Any]) -> FaucetState:
    return FaucetState(
        first_received_round=_round_number(raw.get("firstReceivedFor")),
        last_received_round=_round_number(raw.get("lastReceivedFor")),
        coupons_missed=_opt_str(raw.get("numCouponsMissed")),
    )
