import streamlit as st

# Set the page configuration for the whole app
st.set_page_config(
    page_title="Spreadsheet Consolidator",
    page_icon="📊",
    layout="centered"
)

# Display the main title and introduction
st.title("Welcome to the Spreadsheet Consolidator! 📊")

st.sidebar.success("Select a tool above to get started.")

st.write(
    """
    Combine many Excel or CSV files into one master sheet. Every sheet of every
    file is read, in the order you upload them.

    ### What can you do?
    - **Extract Columns**: Pull a fixed set of columns out of every row and add an empty Comments column.
    - **Concatenate Sheets**: Stack every row as-is, tagged with its source file and sheet.
    - **Merge By Header**: Combine rows by their header names, with a source_file column for auditing.

    Your files are only held in memory for this browser session.

    **To begin, select a tool from the navigation sidebar on the left.**
    """
)
