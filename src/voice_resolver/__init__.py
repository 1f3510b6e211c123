"""
Voice resolver service: random active voice and recordings per campaign model.
"""

__version__ = "0.1.0"
