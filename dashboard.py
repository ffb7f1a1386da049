#!/usr/bin/env python3
"""
Merinfo company explorer - Streamlit Dashboard

Load a dataset (default registry or file upload), then search, filter, sort
and annotate the companies in it. Annotations and preferences persist in
the local SQLite file configured by DATABASE_PATH.
Run: streamlit run dashboard.py
"""

import logging

import streamlit as st
from dotenv import load_dotenv

from config import Settings
from core.annotations import AnnotationStore, InteractionStatus
from core.filtering import Filters, RangeFilter, TriState
from core.formatting import format_bool, format_sek, status_label
from core.i18n import translate
from core.loader import STATUS_ERROR_FORMAT, STATUS_ERROR_READ, STATUS_LOADED, DatasetLoader
from core.models import FinancialField
from core.preferences import LANGUAGES, THEMES, VIEW_MODES, Preferences
from core.query import compute_visible
from core.sorting import SORT_OPTIONS, SortSpec, default_sort_spec
from core.storage import KeyValueStore
from core.table import annotation_changes, records_to_frame

load_dotenv()
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_KEYS = {
    STATUS_LOADED: "status_loaded",
    STATUS_ERROR_FORMAT: "status_error_format",
    STATUS_ERROR_READ: "status_error_read",
}

# "system" keeps Streamlit's own light/dark choice
THEME_CSS = {
    "light": """
<style>
[data-testid="stAppViewContainer"], [data-testid="stHeader"] { background: #ffffff; color: #1f2937; }
[data-testid="stSidebar"] { background: #f3f4f6; }
</style>
""",
    "dark": """
<style>
[data-testid="stAppViewContainer"], [data-testid="stHeader"] { background: #0f172a; color: #e5e7eb; }
[data-testid="stSidebar"] { background: #1e293b; }
[data-testid="stAppViewContainer"] p, [data-testid="stAppViewContainer"] label,
[data-testid="stAppViewContainer"] h1 { color: #e5e7eb; }
</style>
""",
}


@st.cache_resource
def get_services(database_path: str, timeout: int):
    """One store, preference set and loader per server process."""
    kv_store = KeyValueStore(database_path)
    return AnnotationStore(kv_store), Preferences(kv_store), DatasetLoader(timeout=timeout)


st.set_page_config(page_title="Merinfo Explorer", layout="wide", page_icon="🏢")

settings = Settings.from_env()
store, prefs, loader = get_services(settings.database_path, settings.timeout)


def t(key: str, **replacements) -> str:
    return translate(prefs.language, key, **replacements)


def status_name(status: InteractionStatus) -> str:
    return t(f"status_{status.value}")


def tri_label(value: TriState) -> str:
    return t(f"tri_{value.value}")


if "dataset" not in st.session_state:
    st.session_state.dataset = None
    st.session_state.load_status = None  # Key into the translations, None before any load
    st.session_state.generation = 0  # Bumped per load so widgets reset
    st.session_state.filter_generation = 0


def apply_load(result) -> None:
    """Install a load result unless a newer load has been started since."""
    if not loader.is_current(result.token):
        logger.info(f"Discarding stale load result #{result.token}")
        return
    st.session_state.dataset = result.dataset if result.ok else None
    st.session_state.load_status = STATUS_KEYS.get(result.status, result.status)
    st.session_state.generation += 1


# ---------------------------------------------------------------------------
# Sidebar - preferences and dataset
# ---------------------------------------------------------------------------
st.sidebar.markdown(f"### {t('preferences')}")
language = st.sidebar.radio(
    t("language"), LANGUAGES, index=LANGUAGES.index(prefs.language),
    format_func=str.upper, horizontal=True,
)
if language != prefs.language:
    prefs.language = language
    st.rerun()
view_mode = st.sidebar.radio(
    t("view"), VIEW_MODES, index=VIEW_MODES.index(prefs.view_mode),
    format_func=lambda v: t(f"view_{v}"), horizontal=True,
)
if view_mode != prefs.view_mode:
    prefs.view_mode = view_mode
theme = st.sidebar.radio(
    t("theme"), THEMES, index=THEMES.index(prefs.theme),
    format_func=lambda v: t(f"theme_{v}"), horizontal=True,
)
if theme != prefs.theme:
    prefs.theme = theme
if prefs.theme in THEME_CSS:
    st.markdown(THEME_CSS[prefs.theme], unsafe_allow_html=True)

st.sidebar.markdown(f"### {t('dataset')}")
labels = [""] + [d.label for d in settings.datasets]
chosen = st.sidebar.selectbox(t("default_datasets"), labels, format_func=lambda x: x or t("choose"))
if chosen and st.sidebar.button(t("load_dataset")):
    source = next(d for d in settings.datasets if d.label == chosen)
    with st.spinner(t("reading")):
        apply_load(loader.load_url(source.url))

upload = st.sidebar.file_uploader(t("upload"), type=["json", "jsonl", "txt"])
if upload is not None and st.session_state.get("last_upload") != upload.file_id:
    st.session_state.last_upload = upload.file_id
    with st.spinner(t("reading")):
        apply_load(loader.load_upload(upload.getvalue(), upload.name))

# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------
st.markdown(f"<h1>{t('title')}</h1>", unsafe_allow_html=True)

dataset = st.session_state.dataset
gen = st.session_state.generation
fgen = f"{gen}_{st.session_state.filter_generation}"
load_status = t(st.session_state.load_status) if st.session_state.load_status else t("waiting")

col_search, col_sort = st.columns([3, 1])
with col_search:
    search_term = st.text_input(
        t("search"), key=f"search_{gen}", placeholder=t("search_placeholder"), disabled=dataset is None
    )
with col_sort:
    default_sort = str(default_sort_spec(settings.default_sort))
    sort_token = st.selectbox(t("sort"), SORT_OPTIONS, index=SORT_OPTIONS.index(default_sort), disabled=dataset is None)

filters = Filters()
with st.expander(t("advanced_filters"), expanded=False):
    range_cols = st.columns(len(FinancialField))
    for col, which in zip(range_cols, FinancialField):
        with col:
            st.markdown(f"**{t(which.value)}**")
            lo = st.number_input(t("min"), value=None, step=100_000.0, key=f"min_{which.value}_{fgen}")
            hi = st.number_input(t("max"), value=None, step=100_000.0, key=f"max_{which.value}_{fgen}")
            if RangeFilter(lo, hi).is_set:
                filters = filters.with_range(which, lo, hi)

    tri_values = list(TriState)
    c1, c2, c3, c4, c5 = st.columns(5)
    company_phone = c1.selectbox(t("company_phone"), tri_values, format_func=tri_label, key=f"cphone_{fgen}")
    board_phone = c2.selectbox(t("board_phone"), tri_values, format_func=tri_label, key=f"bphone_{fgen}")
    f_skatt = c3.selectbox(t("f_skatt"), tri_values, format_func=tri_label, key=f"fskatt_{fgen}")
    vat = c4.selectbox(t("vat_registered"), tri_values, format_func=tri_label, key=f"vat_{fgen}")
    employer = c5.selectbox(t("employer_registered"), tri_values, format_func=tri_label, key=f"employer_{fgen}")

    facets = dataset.facets if dataset is not None else None
    m1, m2, m3 = st.columns(3)
    sni = m1.multiselect(t("sni"), facets.sni_values if facets else [], key=f"sni_{fgen}")
    categories = m2.multiselect(t("categories"), facets.category_values if facets else [], key=f"cat_{fgen}")
    statuses = m3.multiselect(t("status"), list(InteractionStatus), format_func=status_name, key=f"status_{fgen}")
    favorites_only = st.checkbox(t("favorites_only"), key=f"fav_{fgen}")

    if st.button(t("clear_filters")):
        st.session_state.filter_generation += 1
        st.rerun()

filters = Filters(
    ranges=filters.ranges,
    company_phone=company_phone,
    board_phone=board_phone,
    f_skatt=f_skatt,
    vat_registered=vat,
    employer_registered=employer,
    sni=frozenset(sni),
    categories=frozenset(categories),
    statuses=frozenset(statuses),
    favorites_only=favorites_only,
)

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
if dataset is None:
    st.caption(load_status)
    st.info(t("no_data"))
    st.stop()

annotations = store.snapshot()
visible = compute_visible(dataset.records, annotations, search_term, filters, SortSpec.parse(sort_token))

col_status, col_count = st.columns([4, 1])
col_status.caption(load_status)
col_count.caption(t("records", count=len(visible)))

limit = settings.display_limit
shown = visible[:limit]
if len(visible) > limit:
    st.info(t("truncated", limit=limit))

if not shown:
    st.info(t("no_matches"))
    st.stop()

if prefs.view_mode == "list":
    df = records_to_frame(shown, annotations)
    edited = st.data_editor(
        df,
        use_container_width=True,
        hide_index=True,
        column_order=[
            "favorite", "company_name", "org_number", "city", "status", "revenue",
            "net_profit", "total_assets", "sni_description", "categories",
            "interaction_status", "comment",
        ],
        column_config={
            "favorite":           st.column_config.CheckboxColumn("★"),
            "company_name":       st.column_config.TextColumn(t("company"), disabled=True),
            "org_number":         st.column_config.TextColumn("Org №", disabled=True),
            "city":               st.column_config.TextColumn(t("city"), disabled=True),
            "status":             st.column_config.TextColumn(t("status"), disabled=True),
            "revenue":            st.column_config.NumberColumn(t("revenue"), format="%,d", disabled=True),
            "net_profit":         st.column_config.NumberColumn(t("net_profit"), format="%,d", disabled=True),
            "total_assets":       st.column_config.NumberColumn(t("total_assets"), format="%,d", disabled=True),
            "sni_description":    st.column_config.TextColumn(t("sni"), disabled=True),
            "categories":         st.column_config.TextColumn(t("categories"), disabled=True),
            "interaction_status": st.column_config.SelectboxColumn(
                t("status"), options=[s.value for s in InteractionStatus], required=True
            ),
            "comment":            st.column_config.TextColumn(t("comment"), width="large"),
        },
        key=f"table_{gen}",
    )
    changes = annotation_changes(df, edited)
    if changes:
        for org_number, partial in changes.items():
            store.merge(org_number, partial)
        st.rerun()
else:
    for i, record in enumerate(shown):
        a = annotations.get(record.org_number)
        org = record.org_number
        wkey = f"{i}_{org}_{gen}"
        with st.container(border=True):
            head, star = st.columns([10, 1])
            head.markdown(f"**{record.company.name}** · `{org}` · {status_label(record)}")
            if star.button("★" if a.is_favorite else "☆", key=f"star_{wkey}"):
                store.toggle_favorite(org)
                st.rerun()

            left, right = st.columns(2)
            with left:
                st.markdown(
                    f"{record.company.legal_form or '-'} · reg. {record.company.registration_date or '-'}  \n"
                    f"☎ {record.contact.phone or '-'}  \n"
                    f"{record.contact.address or '-'}, {record.contact.city}, {record.contact.county}"
                )
                f = record.financials
                st.markdown(
                    f"**{t('financials', period=f.period or 'N/A')}**  \n"
                    f"{t('revenue')}: {format_sek(f.revenue)}  \n"
                    f"{t('profit_after_financial_items')}: {format_sek(f.profit_after_financial_items)}  \n"
                    f"{t('net_profit')}: {format_sek(f.net_profit)}  \n"
                    f"{t('total_assets')}: {format_sek(f.total_assets)}"
                )
                tax = record.tax_info
                st.caption(
                    f"{t('f_skatt')} {format_bool(tax.f_skatt)} · "
                    f"{t('vat_registered')} {format_bool(tax.vat_registered)} · "
                    f"{t('employer_registered')} {format_bool(tax.employer_registered)}"
                )
            with right:
                st.markdown(f"**SNI {record.industry.sni_code or '-'}**")
                st.text(record.industry.sni_description or "-")
                if record.industry.categories:
                    st.caption(", ".join(record.industry.categories))
                if record.board:
                    st.markdown("  \n".join(
                        f"{m.name}, {m.role}, {m.age if m.age is not None else '-'}"
                        + (f" · ☎ {m.phone}" if m.phone else "")
                        for m in record.board
                    ))
                else:
                    st.caption(t("no_board"))

            s_col, c_col = st.columns([1, 3])
            options = list(InteractionStatus)
            new_status = s_col.selectbox(
                t("status"), options, index=options.index(a.status),
                format_func=status_name, key=f"istatus_{wkey}",
            )
            new_comment = c_col.text_input(t("comment"), value=a.comment, key=f"comment_{wkey}")
            if new_status != a.status or new_comment != a.comment:
                store.merge(org, status=new_status, comment=new_comment)
                st.rerun()
