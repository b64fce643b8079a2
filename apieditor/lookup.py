"""
Lookup helpers for endpoints and programs.

Resolves user-supplied references (id, name or full name) and produces
fuzzy "did you mean" suggestions when nothing matches.
"""

from difflib import SequenceMatcher
from typing import Iterable, List, Optional

from apieditor.models import Endpoint, RemoteProgram


def find_program(ref: str, programs: Iterable[RemoteProgram]) -> Optional[RemoteProgram]:
    """Find a program by id, then full name, then bare name (case-insensitive)."""
    programs = list(programs)
    for program in programs:
        if program.id == ref:
            return program

    ref_lower = ref.strip().lower()
    for program in programs:
        if program.full_name.lower() == ref_lower:
            return program
    for program in programs:
        if (program.name or "").lower() == ref_lower:
            return program
    return None


def find_similar(query: str, names: Iterable[str], limit: int = 5) -> List[str]:
    """Rank names by similarity to ``query`` for 'did you mean' suggestions."""
    query_lower = query.lower()
    scored = []
    for name in names:
        ratio = SequenceMatcher(None, query_lower, name.lower()).ratio()
        # Boost partial matches
        if query_lower in name.lower():
            ratio += 0.3
        scored.append((name, ratio))

    scored.sort(key=lambda x: x[1], reverse=True)
    return [name for name, score in scored[:limit] if score > 0.3]


def similar_programs(query: str, programs: Iterable[RemoteProgram], limit: int = 5) -> List[str]:
    return find_similar(query, [p.full_name for p in programs], limit=limit)


def similar_endpoints(query: str, endpoints: Iterable[Endpoint], limit: int = 5) -> List[str]:
    return find_similar(query, [e.name for e in endpoints], limit=limit)
