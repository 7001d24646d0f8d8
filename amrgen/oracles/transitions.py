"""
Labels of the structural transitions scored by a `StructuralOracle`, and the values of
the syntactic annotations.
"""

KEEP = "_realize"
DELETE = "_delete"
SWAP = "_swap"
MERGE = "_merge"

ALL_TRANSITIONS = (KEEP, DELETE, SWAP, MERGE)

# Syntactic annotation values.
PASSIVE = "passive"
SINGULAR = "singular"
PLURAL = "plural"
FUTURE = "future"
PRESENT = "present"
PAST = "past"
NO_TENSE = "no_tense"

SYNTACTIC_ANNOTATION_KEYS = ("pos", "number", "voice", "tense")
