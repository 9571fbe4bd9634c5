import streamlit as st

from consolidator.strategies import MERGE
from consolidator.ui import render_tool

st.set_page_config(page_title="Merge By Header", page_icon="🔗")

render_tool(
    MERGE,
    "Merge Sheets By Header 🔗",
    """
    This tool reads the first row of each sheet as its headers and combines rows by column name.
    Columns that only some files have are added to the end, and every row gets a
    `source_file` column so you know where it came from.
    """,
)
