"""
services — Calculation, scenario and reporting services.
"""
