"""Goal and analytics engine for recovery-therapy tracking.

This package contains the business logic and domain models,
isolated from storage backends for easy testing and reasoning.
"""
