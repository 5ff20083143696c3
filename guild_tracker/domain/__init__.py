"""
Domain Layer

Business models and pure logic.
"""
