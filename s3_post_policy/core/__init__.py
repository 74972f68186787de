"""
Core signing logic for upload policies.

Nothing in here performs I/O or reads configuration. The only ambient
input is the clock, and even that is injected.
"""
