"""
Test package for taskclaim.

- unit/: Unit tests for individual modules
- cli/: Typer CLI tests run in-process
- functional/: End-to-end tests that spawn real agent processes
"""
