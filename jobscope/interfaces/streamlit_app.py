"""
interfaces/streamlit_app.py
──────────────────────────────────────────────────────────────────────────────
Streamlit dashboard for JobScope.

Run:
  streamlit run jobscope/interfaces/streamlit_app.py

Features:
  • Categories view: category bubbles → metrics → Table / JSON tabs
  • Category detail: metadata card and newest postings
  • Search: paged free-text search with CSV download
  • Map: postings plotted from location / derived_location
  • Sidebar button for a manual ingestion run
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# ── Path setup ─────────────────────────────────────────────────────────────
# Allow running from the repo root with: streamlit run jobscope/interfaces/streamlit_app.py
_REPO_ROOT = Path(__file__).parent.parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from jobscope.domain.exceptions import CategoryNotFoundError, IngestionInProgressError
from jobscope.services.container import get_ingestion_pipeline, get_query_service

logger = logging.getLogger(__name__)

# ── Page configuration ─────────────────────────────────────────────────────
st.set_page_config(
    page_title="JobScope",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── CSS ────────────────────────────────────────────────────────────────────
st.markdown(
    """
    <style>
    [data-testid="stSidebar"] {
        background: linear-gradient(180deg, #0a1628 0%, #1a3a5c 100%);
    }
    [data-testid="stSidebar"] * { color: #e8f0fe !important; }
    .stApp { background-color: #f4f6f9; }

    .category-card {
        background: white;
        border-left: 5px solid #2563eb;
        border-radius: 6px;
        padding: 14px 18px;
        margin-bottom: 12px;
        box-shadow: 0 1px 4px rgba(0,0,0,0.08);
    }
    .category-card .title { font-size: 1.05em; font-weight: 600; color: #1e293b; }
    .category-card .meta { font-size: 0.8em; color: #94a3b8; margin-top: 4px; }
    .category-card .desc { font-size: 0.87em; color: #475569; margin-top: 6px; }
    </style>
    """,
    unsafe_allow_html=True,
)


# ── Backend singletons ─────────────────────────────────────────────────────

@st.cache_resource(show_spinner="Connecting to the job store…")
def _load_query_service():
    return get_query_service()


@st.cache_resource(show_spinner="Preparing ingestion…")
def _load_pipeline():
    return get_ingestion_pipeline()


# ── Sidebar ────────────────────────────────────────────────────────────────

def _render_sidebar() -> str:
    with st.sidebar:
        st.markdown("## ⚙️ Options")
        st.markdown("---")
        view = st.selectbox(
            "View",
            ["Categories", "Category detail", "Search", "Map"],
            key="view",
        )
        st.markdown("---")
        if st.button("Fetch latest jobs", use_container_width=True):
            _run_ingestion()
        st.markdown(
            "<small style='color:#8facc8'>JobScope<br>NOC 2021 · NAICS · PostgreSQL</small>",
            unsafe_allow_html=True,
        )
    return view


def _run_ingestion() -> None:
    try:
        with st.spinner("Fetching and classifying …"):
            summary = _load_pipeline().ingest_all()
    except IngestionInProgressError:
        st.sidebar.warning("An ingestion run is already in progress.")
        return
    except Exception as exc:
        logger.exception("Manual ingestion failed")
        st.sidebar.error(f"Ingestion failed: {exc}")
        return
    st.sidebar.success(
        f"Upserted {summary.upserted} of {summary.fetched} postings "
        f"({summary.failed} failed)."
    )


# ── Views ──────────────────────────────────────────────────────────────────

def _run_categories() -> None:
    categories = _load_query_service().categories()
    if not categories:
        st.info("No postings stored yet. Use **Fetch latest jobs** in the sidebar.")
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Categories", len({c.name for c in categories}))
    c2.metric("Postings", sum(c.count for c in categories))
    c3.metric("Sectors", len({c.sector for c in categories}))
    st.markdown("---")

    tab_table, tab_json = st.tabs(["📋 Table", "{ } JSON"])
    with tab_table:
        df = pd.DataFrame(
            [
                {
                    "Category": c.name,
                    "Sector": c.sector,
                    "Postings": c.count,
                    "Salary": c.salary,
                    "Median": c.median_salary,
                    "NOC": ", ".join(c.noc_codes),
                    "NAICS": ", ".join(c.naics_codes),
                    "Related": c.is_related,
                }
                for c in categories
            ]
        )
        st.dataframe(df, use_container_width=True)
    with tab_json:
        st.json([c.model_dump(mode="json") for c in categories])


def _run_category_detail() -> None:
    service = _load_query_service()
    names = sorted({c.name for c in service.categories()})
    if not names:
        st.info("No categories yet.")
        return
    name = st.selectbox("Category", names, key="category_name")
    try:
        detail = service.category_detail(name)
    except CategoryNotFoundError:
        st.warning(f"No postings in {name}.")
        return

    st.markdown(
        f"""
        <div class="category-card">
            <div class="title">{detail.name}</div>
            <div class="meta">{detail.sector} &nbsp;·&nbsp; {detail.salary}</div>
            <div class="desc">{detail.description}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.caption("Skills: " + ", ".join(detail.skills))
    st.dataframe(
        pd.DataFrame([j.model_dump(mode="json") for j in detail.jobs]),
        use_container_width=True,
    )


def _run_search() -> None:
    query = st.text_input("Search", placeholder="e.g.  developer, nurse, Acme …", key="q")
    page = st.number_input("Page", min_value=1, value=1, key="page")
    result = _load_query_service().search(query, page=int(page), limit=20)
    st.caption(
        f"{result.pagination.total} matches · page {result.pagination.page} "
        f"of {result.pagination.pages}"
    )
    if not result.jobs:
        return
    df = pd.DataFrame(
        [
            {
                "Title": j.job_title,
                "Employer": j.employer,
                "Category": j.category,
                "Sector": j.sector,
                "Posted": j.post_date,
                "URL": j.url,
            }
            for j in result.jobs
        ]
    )
    st.dataframe(df, use_container_width=True)
    st.download_button(
        "⬇ Download CSV",
        df.to_csv(index=False).encode(),
        file_name="search_results.csv",
        mime="text/csv",
    )


def _run_map() -> None:
    points = _load_query_service().map_jobs()
    if not points:
        st.info("No postings with coordinates.")
        return
    df = pd.DataFrame([p.model_dump(mode="json") for p in points])
    st.map(df, latitude="latitude", longitude="longitude")
    st.dataframe(
        df[["job_title", "employer", "job_type", "url"]],
        use_container_width=True,
    )


# ── Main ───────────────────────────────────────────────────────────────────

_VIEWS = {
    "Categories": _run_categories,
    "Category detail": _run_category_detail,
    "Search": _run_search,
    "Map": _run_map,
}


def main() -> None:
    st.title("🗺️ JobScope")
    st.caption("Job postings classified by NOC occupation category and NAICS sector.")
    view = _render_sidebar()
    _VIEWS[view]()


if __name__ == "__main__":
    main()
