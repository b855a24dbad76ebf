"""
Free-text condition matching for legacy textual fields.

A deliberately loose heuristic, not a string distance: it bridges
inconsistent free-text entry and accepts false positives for recall.
No stemming and no accent folding happen here.
"""

# Tokens must be longer than this to count as shared keywords
MIN_KEYWORD_LENGTH = 3
# Shared keywords needed for a keyword match
MIN_SHARED_KEYWORDS = 2


def normalize_text(text: str) -> str:
    return text.lower().strip()


def fuzzy_matches(a: str, b: str) -> bool:
    """
    Compare two condition strings, short-circuiting on the first rule that hits:

    1. exact equality after normalization
    2. substring containment in either direction
    3. at least MIN_SHARED_KEYWORDS tokens of `a` longer than
       MIN_KEYWORD_LENGTH characters that also appear in `b`
    """
    left = normalize_text(a)
    right = normalize_text(b)

    # Blank text would be contained in everything
    if not left or not right:
        return False

    if left == right:
        return True

    if left in right or right in left:
        return True

    right_tokens = set(right.split())
    shared = [
        token for token in left.split()
        if len(token) > MIN_KEYWORD_LENGTH and token in right_tokens
    ]

    return len(shared) >= MIN_SHARED_KEYWORDS
