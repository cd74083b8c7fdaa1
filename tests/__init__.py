"""
Test suite for catering-core

Contains:
- tests/unit/          : Unit tests for domain models, ledgers and services
"""
