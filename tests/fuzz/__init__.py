"""Intensive property tests for arbitraryext.

This package contains:
- test_generation_contract: failure contract and counter hygiene over
  arbitrary buffers and a recursive expression grammar
- test_sampling_statistics: distribution checks for the length, presence
  and variant samplers at high example counts

All modules are marked with pytest.mark.fuzz and skipped unless
``pytest -m fuzz`` is given.

Python 3.13+.
"""
