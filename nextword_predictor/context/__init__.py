# nextword_predictor/context/__init__.py
# text helpers shared by the fallback source and the selection controller

from .tokenizer import last_word  # lower-cased final token
from .joiner import append_word, is_punctuation  # spacing rule when a word is picked

__all__ = [
    "last_word",
    "append_word",
    "is_punctuation",
]
