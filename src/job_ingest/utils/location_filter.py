"""
Location acceptance for remote-job aggregators

A listing is kept when its candidate-location string names no restriction
and either names a friendly region or is empty. Restrictions win:
"Remote (US Only)" is rejected even though "remote" is friendly.

Besides the fixed phrases below, any "<region> only" clause is a restriction
unless its region is one of ours ("LATAM only" stays acceptable).
"""

import re

FRIENDLY_TERMS = (
    "brazil",
    "brasil",
    "latin america",
    "latam",
    "south america",
    "americas",
    "worldwide",
    "global",
    "anywhere",
    "remote",
)

# Regions that keep an "only" clause acceptable
FRIENDLY_REGIONS = ("brazil", "brasil", "latin america", "latam", "south america", "americas")

# Words that qualify a clause without naming a region ("Remote only")
GENERIC_WORDS = {"remote", "worldwide", "global", "anywhere", "fully", "100%"}

RESTRICTED_TERMS = (
    "usa only",
    "us only",
    "u.s. only",
    "us-only",
    "eu only",
    "uk only",
    "united states only",
    "usa/canada only",
    "north america only",
    "canada only",
)

CLAUSE_SEPARATORS = re.compile(r"[(),;|]|\s+[-–]\s+")
ONLY_CLAUSE = re.compile(r"^(.*?)[\s-]+only\b")


def _has_restrictive_only_clause(loc: str) -> bool:
    for clause in CLAUSE_SEPARATORS.split(loc):
        match = ONLY_CLAUSE.search(clause.strip())
        if not match:
            continue
        region = match.group(1).strip()
        if any(term in region for term in FRIENDLY_REGIONS):
            continue
        if all(word in GENERIC_WORDS for word in region.split()):
            continue
        return True
    return False


def is_restricted_location(location: str | None) -> bool:
    if not location:
        return False
    loc = location.lower()
    if any(term in loc for term in RESTRICTED_TERMS):
        return True
    return _has_restrictive_only_clause(loc)


def is_friendly_location(location: str | None) -> bool:
    """
    Check whether a listing accepts candidates from Brazil / LatAm

    Args:
        location: Candidate-required location string from the aggregator

    Returns:
        True if the listing should be ingested
    """
    if is_restricted_location(location):
        return False

    if location is None or not location.strip():
        return True

    loc = location.lower()
    return any(term in loc for term in FRIENDLY_TERMS)
