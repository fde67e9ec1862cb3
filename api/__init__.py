"""
API Module - FastAPI Backend

This module provides the REST API for the smart-office digital twin.

Key Components:
- main.py: FastAPI application, engine lifespan and system endpoints
- models.py: Pydantic schemas for responses
- dependencies.py: Access to the running engine
- routes/: API endpoint implementations

Endpoints:
- GET /api/status: Live status text
- GET /api/dashboard: Dashboard JSON
- GET /api/validation: Validation report
- POST /api/control?roomId=R1&action=OFF: Manual HVAC override
"""

__version__ = "0.1.0"
