# tests/property/__init__.py
"""Property-based tests for Shiptivity.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. The lane invariant (every lane
is exactly 1..N) is the one that matters most here.

Test categories:
- engine/: Move planning and the reorder state machine
- core/: Validation of raw input
"""
