"""Infer RPC methods from ``<Name>Request`` / ``<Name>Response`` struct pairs."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

_SERVICE_PATTERN = re.compile(r"^[A-Za-z]+(Request|Response)$")


def infer_base_name(name: str) -> Optional[str]:
    """Return ``Login`` for ``LoginRequest`` or ``LoginResponse``, otherwise None."""
    match = _SERVICE_PATTERN.match(name)
    if match is None:
        return None
    return name[: -len(match.group(1))]


def collect_services(names: Iterable[str]) -> Dict[str, int]:
    """Count Request/Response halves per base name, preserving first-seen order."""
    counts: Dict[str, int] = {}
    for name in names:
        base = infer_base_name(name)
        if base is None:
            continue
        counts[base] = counts.get(base, 0) + 1
    return counts


def rpc_methods(counts: Dict[str, int], *, require_pairs: bool = False) -> List[str]:
    """Return the base names that should become RPC methods."""
    if not require_pairs:
        return list(counts)
    return [base for base, count in counts.items() if count >= 2]


__all__ = ["collect_services", "infer_base_name", "rpc_methods"]
