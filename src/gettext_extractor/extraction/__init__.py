"""
Extraction-and-merge engine.

Recognizes translation call-sites, extracts their arguments, resolves
translator comments and merges occurrences into a deterministic catalog.
"""
