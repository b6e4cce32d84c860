"""
profiles — developer profiles with experience and education entries.
"""
