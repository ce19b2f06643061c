from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from partyintel.core.models import CamelModel, FaucetState, ValidatorMetadata


class ExplorerLink(CamelModel):
    name: str
    url: str


class SourceStatus(CamelModel):
    # Upstream queried on behalf of this lookup, and how it went.
    name: str
    status: Literal["success", "not_found", "error"]
    url: str


class ValidatorDetails(CamelModel):
    sponsor: str
    sponsor_name: str
    last_active_at: Optional[str] = None
    metadata: Optional[ValidatorMetadata] = None
    faucet_state: Optional[FaucetState] = None
    contract_id: Optional[str] = None
    created_at: Optional[str] = None


class SponsoredValidator(CamelModel):
    validator_id: str
    validator_display_name: str
    last_active_at: Optional[str] = None
    version: Optional[str] = None


class SponsorDetails(CamelModel):
    validator_count: int
    validators: List[SponsoredValidator] = Field(default_factory=list)


class SiblingValidator(CamelModel):
    validator_id: str
    validator_display_name: str


class SiblingValidators(CamelModel):
    count: int
    validators: List[SiblingValidator] = Field(default_factory=list)


class PartyDetail(CamelModel):
    type: Literal["party"] = "party"

    party_id: str
    namespace: str
    fingerprint: str
    is_dso: bool = Field(default=False, alias="isDSO")
    participant_id: Optional[str] = None

    is_validator: bool = False
    validator_details: Optional[ValidatorDetails] = None
    is_sponsor: bool = False
    sponsor_details: Optional[SponsorDetails] = None
    sibling_validators: Optional[SiblingValidators] = None

    explorers: List[ExplorerLink] = Field(default_factory=list)
    sources: List[SourceStatus] = Field(default_factory=list)


class SearchResult(CamelModel):
    validator_id: str
    validator_display_name: str
    sponsor_id: str
    sponsor_display_name: str
    last_active_at: Optional[str] = None
    version: Optional[str] = None


class SearchResults(CamelModel):
    type: Literal["search_results"] = "search_results"

    query: str
    count: int
    truncated: bool = False
    results: List[SearchResult] = Field(default_factory=list)


class NotFound(CamelModel):
    type: Literal["not_found"] = "not_found"

    query: str
    message: str = "No validator, sponsor or party matches this query"


LookupResult = Annotated[Union[PartyDetail, SearchResults, NotFound], Field(discriminator="type")]
