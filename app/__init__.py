"""
Streamlit Dashboard Application

Operator dashboard for the smart-office digital twin. It talks to the
FastAPI backend over HTTP only.

Components:
- dashboard.py: Main dashboard application
- components/: Reusable UI components
  - charts.py: Plotly chart components
  - status.py: HVAC and validation badges

Features:
- Live room temperatures and HVAC power
- Manual ON / OFF / AUTO control per room
- Validation report
"""

__version__ = "0.1.0"
