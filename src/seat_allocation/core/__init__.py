"""
Core configuration, database, logging and metrics
"""
