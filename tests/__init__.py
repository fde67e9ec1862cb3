"""
Test Suite for the Smart-Office Digital Twin

This module contains tests for:
- Telemetry replay (test_telemetry.py)
- Manual overrides (test_overrides.py)
- Physics rules (test_physics.py)
- Validation logic (test_validators.py)
- Status reporting and the engine facade (test_twin.py)
- Tick scheduling (test_scheduler.py)
- Settings (test_settings.py)
- Dataset generation (test_generator.py)
- API endpoints (test_api.py)

Run tests with:
    pytest tests/ -v
    pytest tests/ --cov=core --cov=api
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
