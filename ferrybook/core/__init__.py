"""
Core infrastructure: configuration-driven database, logging, metrics, security
"""
