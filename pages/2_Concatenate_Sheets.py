import streamlit as st

from consolidator.strategies import CONCATENATE
from consolidator.ui import render_tool

st.set_page_config(page_title="Concatenate Sheets", page_icon="➕")

render_tool(
    CONCATENATE,
    "Concatenate Every Sheet ➕",
    """
    This tool stacks every row of every sheet exactly as it is.
    Two columns are added to the end of each row: the source file name and the sheet name.
    **Note:** Columns are not aligned, so rows keep their original width.
    """,
)
