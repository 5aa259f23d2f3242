"""Ciphertext provider boundary.

The engine only talks to `CiphertextProvider`; the mock coprocessor is the
implementation used by tests and local runs.
"""
