"""
Configuration module.

Default parameters, YAML-backed loading with override precedence, and
validation of the merged result.
"""
