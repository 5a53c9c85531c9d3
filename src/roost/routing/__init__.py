"""Routing — route table, pattern routes, and three-stage resolution.

Routes are registered during setup and frozen when the navigator
validates its configuration.
"""
