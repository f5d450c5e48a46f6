"""
Shared utilities for Crieur components.

Provides the SystemReporter logging layer, the emoji registry used in log
messages and the LaborantTest harness used by every test suite.
"""
