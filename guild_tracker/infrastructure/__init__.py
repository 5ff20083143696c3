"""
Infrastructure Layer

Remote API client, cache tiers and persistence.
"""
