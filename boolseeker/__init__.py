"""
boolseeker - locate boolean methods in decoded Android applications and flag
the ones that look like anti-tampering checks.
"""

__version__ = "1.0.0"
