"""Routing: route table, trie matcher, and registration bookkeeping.

Routes are registered during setup and compiled into an immutable
lookup structure when the dispatcher is built.
"""
