from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import quote

from partyintel.lookup.schemas import ExplorerLink


@dataclass(frozen=True)
class Explorer:
    name: str
    base_url: str
    # `{party}` is replaced with the percent-encoded party id; None links to the homepage.
    party_path: Optional[str] = None

    def link_for(self, party_id: str) -> ExplorerLink:
        if self.party_path is None:
            return ExplorerLink(name=self.name, url=f"{self.base_url}/")
        path = self.party_path.format(party=quote(party_id, safe=""))
        return ExplorerLink(name=self.name, url=f"{self.base_url}{path}")


DEFAULT_EXPLORERS: Sequence[Explorer] = (
    Explorer("CCView.io", "https://ccview.io", "/governance/{party}/"),
    Explorer("CantonScan", "https://www.cantonscan.com", "/party/{party}"),
    Explorer("5N Lighthouse", "https://lighthouse.cantonloop.com"),
    Explorer("CC Explorer", "https://ccexplorer.io"),
    Explorer("The Tie", "https://canton.thetie.io"),
)


def explorer_links(party_id: str, explorers: Sequence[Explorer] = DEFAULT_EXPLORERS) -> List[ExplorerLink]:
    return [e.link_for(party_id) for e in explorers]
