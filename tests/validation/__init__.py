# tests/validation/__init__.py
"""Physics Verification & Validation tests for lightlink.

These tests go beyond software correctness to verify:
- The light-time equation against an independent root find
- Doppler kinematics against range rates and the classical two-way law
- Clock rates against the gravitational redshift of a static tower
"""
