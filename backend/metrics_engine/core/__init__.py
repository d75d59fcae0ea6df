"""
core — Configuration, logging and error types shared by the engine.
"""
