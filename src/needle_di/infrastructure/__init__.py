"""
Infrastructure layer - External integrations.

This layer contains integrations with external frameworks.
It depends on both Application and Domain layers.
"""
