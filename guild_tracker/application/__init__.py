"""
Application Layer

Services orchestrating the roster pipelines.
"""
