"""
Ontology Cache.

Responsibilities:
- Memoize a trade's skill set and required-certification links by trade id.
- Scope cached data to a single matching call (cleared on entry).

Non-Responsibilities:
- No staleness tracking or invalidation beyond clear().
- No error handling: store failures propagate and nothing is cached.

Invariant:
An entry is only stored once both of its lookups have succeeded.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .database import Skill, TradeCertification
from .logger import StructuredLogger, get_logger


@dataclass(frozen=True)
class TradeOntology:
    skills: List[Skill]
    cert_links: List[TradeCertification]


class OntologyCache:
    """Read-through cache over OntologyStore trade lookups."""

    def __init__(self, store, logger: Optional[StructuredLogger] = None):
        self.store = store
        self.logger = logger or get_logger()
        self._entries: Dict[str, TradeOntology] = {}

    def get(self, trade_id: str) -> TradeOntology:
        cached = self._entries.get(trade_id)
        if cached is not None:
            self.logger.record_cache_hit()
            return cached

        self.logger.record_cache_miss()
        # Sequential: the store's session is not thread-safe.
        skills = self.store.get_skills_by_trade(trade_id)
        cert_links = self.store.get_certifications_by_trade(trade_id)

        entry = TradeOntology(skills=list(skills), cert_links=list(cert_links))
        self._entries[trade_id] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, trade_id: str) -> bool:
        return trade_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
