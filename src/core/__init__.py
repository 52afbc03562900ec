"""
Core domain models, table-driven arithmetic, and JSON contracts.

This module contains the foundational building blocks of the chain engine
that do not depend on the chain protocol itself.
"""
