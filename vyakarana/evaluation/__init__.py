# Evaluation package for the Vyakarana rule engine
"""
Single-query, batch and chained rule evaluation with audit trails.
"""
