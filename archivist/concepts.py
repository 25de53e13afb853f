"""Mood and theme vocabulary used to broaden queries."""
from types import MappingProxyType
from typing import List, Sequence

CONCEPT_MAP = MappingProxyType({
    "sad": ("tragedy", "drama", "death", "grief", "melancholy", "cry", "tear", "loss", "pain", "heartbreak"),
    "happy": ("comedy", "humor", "funny", "joy", "laugh", "satire", "fun", "wit", "light", "cheerful"),
    "scary": ("horror", "thriller", "suspense", "fear", "ghost", "dark", "creepy", "blood", "evil", "mystery"),
    "love": ("romance", "relationship", "marriage", "heart", "affair", "kiss", "crush", "passion", "lovers"),
    "adventure": ("fantasy", "journey", "travel", "quest", "epic", "magic", "action", "dragon", "wild", "hero"),
    "future": ("sci-fi", "science", "space", "robot", "technology", "dystopia", "cyber", "ai", "mars", "alien"),
    "rich": ("wealth", "money", "society", "class", "aristocrat", "empire", "luxury", "gold", "power", "king"),
    "history": ("war", "past", "ancient", "king", "queen", "empire", "century", "historical", "period", "19th"),
})


def split_terms(query: str) -> List[str]:
    """Lowercase and split on whitespace. Punctuation is kept."""
    return query.lower().split()


def expand_terms(terms: Sequence[str]) -> List[str]:
    """
    Append concept keywords for every term containing a concept key.
    
    Each (term, key) hit appends the full keyword list again, so
    duplicates are expected.
    
    Args:
        terms: Lowercased query terms
        
    Returns:
        The original terms followed by the expansions
    """
    expanded = list(terms)
    for term in terms:
        for key, related in CONCEPT_MAP.items():
            if key in term:
                expanded.extend(related)
    return expanded
