# CLI package for the Vyakarana rule engine
"""
Read-only CLI interface for inspecting the rule engine.

Commands:
    vyakarana classify    — Phoneme features
    vyakarana savarna     — Homogeneity check
    vyakarana weight      — Laghu/guru weights
    vyakarana scope       — Governing adhikaras
    vyakarana pratyahara  — Pratyahara expansion
    vyakarana resolve     — Evaluate the core corpus
"""
