"""
Configuration utilities for applications using FedoraAlchemy.
"""
