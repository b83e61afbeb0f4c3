# nextword_predictor/context/joiner.py
import re

# selected "words" made only of these characters attach to the previous word
_punct_re = re.compile(r"^[.,!?;:()\"'`-]+$")


def is_punctuation(word: str) -> bool:
    return bool(word) and _punct_re.match(word) is not None


def append_word(text: str, word: str) -> str:
    """
    Append a selected word to the running text.

    A single space is inserted unless the text is empty, already ends in
    whitespace, or the word is pure punctuation:
        append_word("The future of work is", "great") -> "The future of work is great"
        append_word("The future of work is", ",")     -> "The future of work is,"
    """
    if not text or text[-1].isspace() or is_punctuation(word):
        return text + word
    return f"{text} {word}"
