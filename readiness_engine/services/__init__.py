"""
Services module for the Sales Readiness Engine.
"""
