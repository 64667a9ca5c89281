"""
Interaction corpus analysis.

Rule-based heuristics over feedback, posts and questions:
- topics: keyword topics per sentiment bucket and the sentiment score
- reply_style: response length, emoji habit, formality, signature phrases
- timing: peak days and best contact times
- tunables: the lexicons and thresholds behind all of the above
"""

from business_dna.analysis.analyzer import CorpusSignals, analyze
from business_dna.analysis.tunables import DEFAULT_TUNABLES, AnalyzerTunables

__all__ = [
    "CorpusSignals",
    "analyze",
    "AnalyzerTunables",
    "DEFAULT_TUNABLES",
]
