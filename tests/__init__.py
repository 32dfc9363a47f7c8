"""
Test suite for veritrace

- Unit tests for the pattern model, identity filter, key statements,
  reifier and inference builder
- Reconstruction scenarios (plain answer, single rule, conjunction)
- Batch driver, scenario loader, settings, export and CLI tests
"""
