"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files should follow the pattern:
    test_<module_name>.py

Example:
    tests/test_schema.py          - Tests for harmony_engine/data/schema.py
    tests/test_harmony.py         - Tests for harmony_engine/rules/harmony.py
    tests/test_substitutions.py   - Tests for harmony_engine/rules/substitutions.py
"""
