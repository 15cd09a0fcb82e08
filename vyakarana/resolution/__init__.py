# Resolution package for the Vyakarana rule engine
"""
Conflict and substitution resolution.

Narrows co-matching rules to one outcome (vipratisedha, nisedha,
vibhasha) and decides which unit a rule sees after a substitution
(sthanivadbhava).
"""
