"""
streamlit_app.py — CodeMigrate Workspace Entry Point
----------------------------------------------------

Run with ``streamlit run streamlit_app.py`` while the relay service
(``uvicorn app.main:app``) is reachable at ``MIGRATE_API_URL``.
"""

import streamlit as st

from ui.workspace import render


st.set_page_config(
    page_title="CodeMigrate AI",
    page_icon="🧬",
    layout="wide",
    initial_sidebar_state="expanded",
)

render()
