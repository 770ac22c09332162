"""
Ledgerly Data Interchange - Streamlit Frontend
Export financial records to JSON, CSV or PDF and import them back
"""

import streamlit as st
import sys
from pathlib import Path
from datetime import date

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from logging_config import setup_logging
from main import InterchangeService, MEDIA_TYPES, SUPPORTED_FORMATS, export_filename, infer_format
from models import SectionOptions, UserIdentity
from repository import InMemoryRepository

setup_logging(log_file="frontend.log")

# Page configuration
st.set_page_config(
    page_title="Ledgerly Data Interchange",
    page_icon="💾",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #ef8145;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #808183;
        margin-bottom: 2rem;
    }
    .success-box {
        background-color: #e8e0dc;
        border: 1px solid #ef8145;
        color: #ef8145;
        padding: 1rem;
        border-radius: 0.5rem;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)

# Initialize session state
if 'repository' not in st.session_state:
    st.session_state.repository = InMemoryRepository()
if 'outcome' not in st.session_state:
    st.session_state.outcome = None


def main():
    """Main application function."""

    st.markdown('<div class="main-header">💾 Ledgerly Data Interchange</div>', unsafe_allow_html=True)
    st.markdown('<div class="sub-header">Back up your transactions, budgets and goals, or restore them from an export</div>', unsafe_allow_html=True)

    # Sidebar - identity and sections
    with st.sidebar:
        st.header("📋 Configuration")

        st.subheader("1. Account")
        username = st.text_input("Username", value="demo")
        email = st.text_input("Email (optional)", value="")

        st.divider()

        st.subheader("2. Sections")
        sections = SectionOptions(
            transactions=st.checkbox("Transactions", value=True),
            budgets=st.checkbox("Budgets", value=True),
            goals=st.checkbox("Savings goals", value=True),
        )

    if not username.strip():
        st.info("👈 Enter a username in the sidebar to get started")
        return

    user = UserIdentity(username=username.strip(), email=email.strip() or None)
    service = InterchangeService(st.session_state.repository)

    export_tab, import_tab = st.tabs(["📤 Export", "📥 Import"])

    with export_tab:
        render_export(service, user, sections)

    with import_tab:
        render_import(service, user, sections)


def render_export(service: InterchangeService, user: UserIdentity, sections: SectionOptions):
    """Download buttons for each export format."""
    repository = st.session_state.repository

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Transactions", len(repository.find_transactions(user)))
    with col2:
        st.metric("Budgets", len(repository.find_budgets(user)))
    with col3:
        st.metric("Goals", len(repository.find_goals(user)))

    if not sections.any_enabled():
        st.warning("⚠️ Select at least one section in the sidebar")
        return

    st.caption("JSON and CSV exports restore exactly. The PDF report is for reading; importing it back is best-effort.")

    columns = st.columns(len(SUPPORTED_FORMATS))
    for column, fmt in zip(columns, SUPPORTED_FORMATS):
        with column:
            try:
                data = service.export_data(user, fmt, sections)
            except Exception as e:
                st.error(f"❌ {fmt.upper()} export failed: {str(e)}")
                continue

            st.download_button(
                label=f"Download {fmt.upper()}",
                data=data,
                file_name=export_filename(fmt, date.today()),
                mime=MEDIA_TYPES[fmt],
                type="primary" if fmt == "json" else "secondary",
                use_container_width=True
            )


def render_import(service: InterchangeService, user: UserIdentity, sections: SectionOptions):
    """Upload an export file and show the import outcome."""
    uploaded_file = st.file_uploader(
        "Choose an export file",
        type=[ext.lstrip('.') for ext in config.ALLOWED_FILE_TYPES],
        help="Files exported from Ledgerly as JSON, CSV or PDF"
    )
    dry_run = st.checkbox("Preview only (do not save records)", value=False)

    if st.button("🚀 Import", type="primary", disabled=uploaded_file is None):
        content = uploaded_file.getvalue()
        is_valid, error = config.validate_file(uploaded_file.name, len(content))
        if not is_valid:
            st.error(f"❌ {error}")
            return

        with st.spinner(f"Importing {uploaded_file.name}..."):
            st.session_state.outcome = service.import_data(
                user, infer_format(uploaded_file.name), content, sections, dry_run=dry_run
            )

    if st.session_state.outcome:
        display_outcome(st.session_state.outcome)


def display_outcome(outcome):
    """Display import counts and warnings."""
    if outcome.success:
        st.markdown(f'<div class="success-box">✅ {outcome.message}</div>', unsafe_allow_html=True)
    else:
        st.error(f"❌ {outcome.message}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Transactions imported", outcome.transactions_imported)
    with col2:
        st.metric("Budgets imported", outcome.budgets_imported)
    with col3:
        st.metric("Goals imported", outcome.goals_imported)

    if outcome.warnings:
        with st.expander(f"⚠️ {len(outcome.warnings)} warnings", expanded=False):
            for warning in outcome.warnings:
                st.markdown(f"- {warning}")


if __name__ == "__main__":
    main()
