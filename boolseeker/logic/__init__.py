"""
Logic layer for boolseeker: domain models and services.
"""
