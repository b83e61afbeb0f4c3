"""
nextword_predictor

Interactive next-word prediction assistant.
Contains:
 - prediction sources (remote completion/chat endpoints, local fallback generator)
 - the normalizer that turns raw candidates into a stable top-5 prediction set
 - the selection controller driving text growth word by word
 - thin Rich CLI and Textual TUI front ends
"""

__version__ = "0.1.0"
