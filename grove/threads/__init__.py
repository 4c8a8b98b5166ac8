"""Threads — flat comment records assembled into reply trees.

This package provides the primitives for:
- Building: a creation-ordered record list into a forest of root comments
- Mutation: inserting and removing nodes at any depth in place
- Visibility: per-session expanded/collapsed state layered over comment ids
- Sessions: optimistic local mutation mirrored to a remote comment store
"""
