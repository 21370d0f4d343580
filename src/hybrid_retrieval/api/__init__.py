"""
Hybrid Retrieval Engine - HTTP API
"""
