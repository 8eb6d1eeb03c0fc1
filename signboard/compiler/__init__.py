"""
Compiler module - Transform finalized speech into play units.

Tokenization and phrase matching live here. After matching, only
ordered library keys remain.
"""

from signboard.compiler.text import normalize_key, normalize_text, normalize_token, tokenize
from signboard.compiler.matcher import MatchResult, PlayUnit, match_text, match_tokens

__all__ = [
    # Text
    "tokenize",
    "normalize_token",
    "normalize_text",
    "normalize_key",
    # Matching
    "PlayUnit",
    "MatchResult",
    "match_tokens",
    "match_text",
]
