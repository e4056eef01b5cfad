"""
Keyword translation for image search.

Turns Korean promotional text into a short list of English search terms:
- dictionary terms (exact token match, then first substring match)
- category heuristics over the whole text when no token matched
- generic marketing terms when nothing matched at all
"""
# stdlib imports
import logging

# local imports
from keyword_dictionary import CATEGORY_HEURISTICS, GENERIC_FALLBACK_TERMS, KEYWORD_MAP
from models import KeywordSet


logger = logging.getLogger(__name__)

MAX_KEYWORDS = 4


def _lookup_token(token: str, keyword_map: dict[str, str]) -> str | None:
    """
    Map one whitespace-separated token to its English term.

    Exact match first; otherwise the first key (dictionary order) that
    appears inside the token, e.g. "버거," -> "burger".
    """
    if token in keyword_map:
        return keyword_map[token]

    for korean, english in keyword_map.items():
        if korean in token:
            return english

    return None


def translate(text: str, keyword_map: dict[str, str] = KEYWORD_MAP) -> KeywordSet:
    """
    Translate promotional text into a ranked KeywordSet.

    Args:
        text: Free-form caption text (Korean expected; any text is accepted).
        keyword_map: Korean -> English map; defaults to KEYWORD_MAP.

    Returns:
        KeywordSet with 1 to 4 terms. Never empty and never raises for string input.
    """
    terms = []
    for token in text.split():
        term = _lookup_token(token, keyword_map)
        if term is not None:
            terms.append(term)

    if terms:
        # Earliest discovered terms win; later ones are dropped
        return KeywordSet(terms=terms[:MAX_KEYWORDS], source="dictionary")

    for markers, heuristic_terms in CATEGORY_HEURISTICS:
        if any(marker in text for marker in markers):
            logger.info(f"No dictionary match, using category terms: {heuristic_terms}")
            return KeywordSet(terms=list(heuristic_terms), source="heuristic")

    logger.info("No dictionary or category match, using generic fallback terms")
    return KeywordSet(terms=list(GENERIC_FALLBACK_TERMS), source="fallback")
