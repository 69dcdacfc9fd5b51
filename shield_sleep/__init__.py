"""
SHIELD Sleep API.

This package contains:
- The shield score engine (threshold rules and bio-age bucketing)
- Input validation for self-reported sleep metrics
- The FastAPI transport layer
"""
