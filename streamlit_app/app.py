"""
NutriCart - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page configuration
and provides the home page with the shared sidebar (sign-in and cart summary).

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_🍳_Recipes.py`) will appear
as pages in the sidebar navigation.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and nutricart
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from utils.api_client import get_health_status
from utils.session import get_or_create_session_id
from ui.layout import page_header, render_sidebar

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="NutriCart",
    page_icon="🥗",
    layout="wide",
    initial_sidebar_state="expanded"
)

session_id = get_or_create_session_id()
user_id = render_sidebar(session_id)

page_header(
    "NutriCart",
    subtitle="Find recipes, fill your cart with groceries, and see what it does for your daily nutrients."
)

backend_status = get_health_status()
if backend_status is None:
    st.warning("The backend is offline. Start it with `uvicorn api.main:app --reload`.")

st.markdown("#### Get started")
col1, col2, col3 = st.columns(3, gap="medium")

with col1:
    if st.button("Find recipes", use_container_width=True, type="primary"):
        st.switch_page("pages/01_🍳_Recipes.py")

with col2:
    if st.button("Search groceries", use_container_width=True):
        st.switch_page("pages/02_🥕_Groceries.py")

with col3:
    if st.button("Nutrient chart", use_container_width=True):
        st.switch_page("pages/04_📊_Nutrient_Chart.py")

st.divider()

with st.expander("How it works", expanded=False):
    st.markdown("""
    1. **Recipes** – Search Edamam recipes, ten per page.
    2. **Groceries** – Search USDA FoodData Central and add items to your cart.
    3. **Daily values** – Sign in and fill in your daily values once.
    4. **Nutrient chart** – See how much of your daily or weekly needs the cart covers.
    5. **Orders** – Send your cart to a grocery store and keep the order history.
    """)
