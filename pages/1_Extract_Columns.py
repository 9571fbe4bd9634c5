import streamlit as st

from consolidator.strategies import EXTRACT
from consolidator.ui import render_tool

st.set_page_config(page_title="Extract Columns", page_icon="🧮")

render_tool(
    EXTRACT,
    "Extract Fixed Columns 🧮",
    """
    This tool picks the same set of columns out of every row of every sheet and
    stacks them into one table with a header row and an empty **Comments** column.
    The columns to keep are set in `consolidator_settings.json`.
    """,
)
