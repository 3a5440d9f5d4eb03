"""
Consulta API - identifier resolution and order diagnostics
"""
__version__ = "1.0.0"
