"""
Tests package for the Drophere backend.

This package contains test suites organized by type:
- unit/: Unit tests for domain, application, infrastructure and API layers
- property/: Property-based tests with Hypothesis
- integration/: Integration tests against a real Redis
"""
