"""Archive stage of the tick extract pipeline.

This package commits a successful merge by relocating its output and
source files into timestamped archive batches.
"""
