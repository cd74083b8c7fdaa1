"""
Core domain models, ledgers, and invariants.

This module contains the foundational building blocks of the catering
order core that are independent of external systems (HTTP, databases, etc.).
"""
