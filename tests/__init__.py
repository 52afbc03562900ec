"""
Test suite for the chain engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
