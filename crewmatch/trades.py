"""
Trade name resolution between worker records and the ontology.

Worker profiles carry a free-text trade label while projects and the
ontology use canonical trade names. The tables below are hand-maintained
domain data; unmapped labels pass through unchanged.
"""

from typing import Dict, List

# worker.trade label -> ontology trades.name
WORKER_TRADE_TO_ONTOLOGY: Dict[str, str] = {
    "Electrician": "Electrician",
    "HVAC Technician": "HVAC Technician",
    "Pipefitter": "Plumber/Pipefitter",
    "Plumber": "Plumber/Pipefitter",
    "Structural Ironworker": "Structural Ironworker",
    "Concrete Specialist": "Concrete Worker",
    "Fire Protection": "Fire Protection Specialist",
    "Network Technician": "Low Voltage Technician",
    "Controls Technician": "Controls/BMS Technician",
    "Welder": "Welder",
    "General Labor": "General Labor",
}


def _invert(mapping: Dict[str, str]) -> Dict[str, List[str]]:
    inverted: Dict[str, List[str]] = {}
    for label, canonical in mapping.items():
        inverted.setdefault(canonical, []).append(label)
    return inverted


# ontology trades.name -> every worker label that staffs it, in table order
ONTOLOGY_TO_WORKER_TRADES: Dict[str, List[str]] = _invert(WORKER_TRADE_TO_ONTOLOGY)


def resolve_to_ontology(worker_trade_label: str) -> str:
    """Canonical ontology name for a worker's trade label (the label itself if unmapped)."""
    return WORKER_TRADE_TO_ONTOLOGY.get(worker_trade_label, worker_trade_label)


def resolve_to_worker_labels(canonical_name: str) -> List[str]:
    """
    Worker-facing labels that map to a canonical trade.

    Falls back to ``[canonical_name]`` so one-to-one and unmapped trades
    still find workers whose label equals the canonical name.
    """
    labels = ONTOLOGY_TO_WORKER_TRADES.get(canonical_name)
    if not labels:
        return [canonical_name]
    return list(labels)
