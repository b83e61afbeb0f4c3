# nextword_predictor/context/tokenizer.py
# simple whitespace tokenizer, enough for keying fallback rules


def simple_tokenize(s: str):
    """
    Return list of whitespace separated tokens, lower-cased.
    Punctuation stays attached, e.g. "work," is one token.
    """
    if not s:
        return []
    return [t.lower() for t in s.split() if t.strip()]


def last_word(s: str) -> str:
    """Lower-cased final token of `s`, or '' when there is none."""
    toks = simple_tokenize(s)
    return toks[-1] if toks else ""
