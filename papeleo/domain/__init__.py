"""Domain-level policies and pure business rules.

Month bucketing, requirement expansion planning, placeholder substitution,
status aggregation and storage path naming live here, independent from the
services and repositories that apply them.
"""
