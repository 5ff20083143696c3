"""
Presentation Layer

HTTP interface of the guild tracker.
"""
