"""Oblivious state transition engine.

Evaluator -> validator -> committer -> grants. Everything here works on
ciphertexts only; nothing branches on an encrypted value.
"""
