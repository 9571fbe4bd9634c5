"""The file-queue view shared by every consolidation page."""
import logging

import streamlit as st

from . import models
from .config import load_settings
from .errors import ConsolidationError
from .logs import setup_logging
from .models import InputFile
from .serializer import XLSX_MIME, download_filename
from .session import ConsolidationSession
from .strategies import get_strategy

logger = logging.getLogger(__name__)

STATUS_ICONS = {
    models.PENDING: "⏳",
    models.PROCESSING: "🔄",
    models.COMPLETED: "✅",
    models.ERROR: "❌",
}


def _state_key(kind, name):
    return f"{kind}_{name}"


def get_session(kind):
    """One ConsolidationSession per tool page, kept for the browser session."""
    key = _state_key(kind, "session")
    if key not in st.session_state:
        st.session_state[key] = ConsolidationSession()
        st.session_state[_state_key(kind, "seen_uploads")] = set()
        st.session_state[_state_key(kind, "uploader_nonce")] = 0
    return st.session_state[key]


def sync_uploads(kind, session, uploaded_files):
    """Queues uploads the session has not seen yet. Removed files stay removed."""
    seen = st.session_state[_state_key(kind, "seen_uploads")]
    new_files = []
    for uploaded in uploaded_files or []:
        if uploaded.file_id in seen:
            continue
        seen.add(uploaded.file_id)
        new_files.append(InputFile(name=uploaded.name, data=uploaded.getvalue()))
    if new_files:
        session.add_files(new_files)
        logger.info("Queued %d new file(s)", len(new_files))


def describe(entry):
    rows = f"{entry.row_count} rows" if entry.row_count is not None else entry.status.capitalize()
    return f"{STATUS_ICONS[entry.status]} **{entry.name}** · {entry.size_kb:.1f} KB • {rows}"


def render_file_list(kind, session):
    header_col, clear_col = st.columns([4, 1])
    with header_col:
        st.subheader(f"Files to process ({len(session.files)})")
    with clear_col:
        if st.button("Clear all", key=_state_key(kind, "clear")):
            session.clear()
            # A fresh key empties the uploader widget too
            st.session_state[_state_key(kind, "uploader_nonce")] += 1
            st.rerun()

    for entry in session.files:
        name_col, remove_col = st.columns([6, 1])
        with name_col:
            st.markdown(describe(entry))
        with remove_col:
            if st.button("✖️", key=_state_key(kind, f"remove_{entry.id}")):
                session.remove_file(entry.id)
                st.rerun()


def run_consolidation(kind, session, settings):
    strategy = get_strategy(kind, settings)
    with st.status("Consolidating...", expanded=True) as status:
        def on_status(entry):
            status.write(describe(entry))

        try:
            session.run(strategy, on_status=on_status)
            status.update(label="Consolidation complete", state="complete")
        except ConsolidationError as e:
            logger.error("Consolidation failed: %s", e, exc_info=True)
            status.update(label="Consolidation failed", state="error")
    # Redraw the queue with the final per-file states
    st.rerun()


def render_result(kind, session, settings):
    summary = session.summary
    st.success("Files consolidated successfully!")
    st.info(
        f"Files processed: **{summary['files_processed']}** • "
        f"Total rows in consolidated file: **{summary['total_rows']}**"
    )

    st.subheader("Consolidated Data Preview")
    st.dataframe(session.result.to_frame().head(50))

    try:
        excel_bytes = session.build_download(settings)
    except ConsolidationError as e:
        st.error(f"{e} Please try again.")
        return

    st.download_button(
        label="⬇️ Download Consolidated Excel",
        data=excel_bytes,
        file_name=download_filename(kind),
        mime=XLSX_MIME,
    )


def render_tool(kind, title, description):
    settings = load_settings()
    setup_logging(settings["log_level"])
    session = get_session(kind)

    st.title(title)
    st.write(description)

    # --- 1. File Uploader ---
    uploaded_files = st.file_uploader(
        "Choose your spreadsheet files",
        accept_multiple_files=True,
        type=settings["accepted_types"],
        key=_state_key(kind, f"uploader_{st.session_state[_state_key(kind, 'uploader_nonce')]}"),
    )
    sync_uploads(kind, session, uploaded_files)

    if not session.files:
        st.caption("Upload as many Excel or CSV files as you need. Every sheet of every file is included.")
        return

    # --- 2. Queue ---
    render_file_list(kind, session)

    # --- 3. Processing Logic ---
    if st.button("Consolidate Files", type="primary"):
        run_consolidation(kind, session, settings)

    if session.result is not None:
        # --- 4. Download ---
        render_result(kind, session, settings)
    elif session.error:
        st.error(session.error)
