"""
Host adapters for the cascade engine.
"""
