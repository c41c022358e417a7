"""
Collation helpers for case- and accent-insensitive uniqueness.

Usernames and note titles are compared the way an "en" collation at
secondary strength compares them: letters are equal regardless of case
and of most accents. The key produced here is stored next to the value
and carries the unique index.
"""
import unicodedata


# PUBLIC_INTERFACE
def collation_key(value: str) -> str:
    """Returns the comparison key for value (NFKD, marks dropped, casefolded)."""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", base.casefold())


# PUBLIC_INTERFACE
def collated_equal(left: str, right: str) -> bool:
    """True when left and right differ only in case or accents."""
    return collation_key(left) == collation_key(right)
