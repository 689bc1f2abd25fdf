"""Dictionary lookups for the word grid."""

from .dictionary import Dictionary, EmptyDictionary, normalize_words

__all__ = [
    "Dictionary",
    "EmptyDictionary",
    "normalize_words",
]
