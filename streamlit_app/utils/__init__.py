"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Backend API communication
- session: Browser session id
- state: App state (reducer) and last search views in session state
"""
