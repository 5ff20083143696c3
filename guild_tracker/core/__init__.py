"""
Core

Configuration, exceptions, base models and protocols.
"""
