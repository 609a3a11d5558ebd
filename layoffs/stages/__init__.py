"""Pipeline stages: snapshot, deduplication, normalization, backfill, pruning.

Each stage exposes a small, pure function API over a pandas DataFrame and is
tuned by config keys under `processing.*` in the runtime configuration.
"""
