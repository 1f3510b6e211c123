"""
Voice resolution domain.
"""
