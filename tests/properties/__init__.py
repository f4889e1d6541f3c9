"""
Property-based testing using Hypothesis.

This package contains property tests that verify invariants of the
simulation across randomly generated inputs.

Modules:
    test_claim_properties: claim merging and cash flow queue ordering
    test_engine_properties: evolve stepping and deterministic valuations
"""
