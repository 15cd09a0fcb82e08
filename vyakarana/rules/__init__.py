# Rules package for the Vyakarana rule engine
"""
Rule corpus, registry and adhikara scopes.

Rules are loaded once, validated structurally, and never mutated.
"""
