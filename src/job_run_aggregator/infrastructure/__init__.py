"""
Infrastructure Layer

Bucket access, job run backings, cache persistence and logging.
"""
