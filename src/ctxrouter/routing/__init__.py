"""Routing — route builder, two-tier store and pattern matching.

Routes are registered during setup through the ``route / via / to`` chain
and committed into an exact-match table or an ordered parameter list.
"""
