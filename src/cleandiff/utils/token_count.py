# src/cleandiff/utils/token_count.py
from functools import lru_cache
from typing import NamedTuple

import tiktoken

ENCODING_NAMES = ("cl100k_base", "p50k_base")
CHARS_PER_TOKEN = 4


@lru_cache(maxsize=1)
def load_encoding():
    """Returns the first encoding tiktoken can load; re-raises the last failure."""
    error = None
    for name in ENCODING_NAMES:
        try:
            return tiktoken.get_encoding(name)
        except Exception as e:
            error = e
    raise error


def count_tokens(text: str) -> int:
    """Estimates how many LLM tokens a model would spend reading `text`."""
    if not text:
        return 0
    try:
        # Diffs can quote special markers like <|endoftext|>; count them as text
        return len(load_encoding().encode(text, disallowed_special=()))
    except Exception:
        # No encoding available (e.g. offline)
        return len(text) // CHARS_PER_TOKEN


class TokenSavings(NamedTuple):
    before: int
    after: int

    @property
    def saved(self) -> int:
        return self.before - self.after

    @property
    def percentage(self) -> float:
        return self.saved / self.before * 100 if self.before else 0.0


def estimate_savings(original_text: str, cleaned_text: str) -> TokenSavings:
    return TokenSavings(count_tokens(original_text), count_tokens(cleaned_text))
