"""Merge stage of the tick extract pipeline.

This package walks the input root, parses per-entity source files,
and streams their rows into one provenance-tagged output file.
"""
