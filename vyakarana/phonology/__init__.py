# Phonology package for the Vyakarana rule engine
"""
Phoneme feature model.

Static feature table, segmentation, derived predicates (savarna,
anunasika, vrddhi, guna, laghu/guru) and pratyahara expansion.
"""
