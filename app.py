"""
app.py
Streamlit Student Membership System.
Run: streamlit run app.py
"""

from __future__ import annotations

import logging
import os

import streamlit as st

import actions
import db
import utils
from errors import NotFoundError, PersistenceError
from models import DEFAULT_MEMBERSHIP_FEE, YEAR_LEVELS, FilterState
from query import (
    calculate_stats,
    filter_students,
    format_revenue,
    students_to_frame,
    year_counts_frame,
)
from registry import Registry

logging.basicConfig(
    level=os.getenv("MEMBERSHIP_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("membership.app")

st.set_page_config(page_title="Student Membership System", layout="wide")


def init_once():
    if "registry" in st.session_state:
        return
    try:
        db.init_db()
    except PersistenceError as e:
        log.warning("Starting without storage: %s", e)
    students, deleted = db.load_state()
    st.session_state.registry = Registry(students, deleted, persist=db.save_state)
    st.session_state.guard = actions.SubmissionGuard()
    st.session_state.filter = FilterState()
    st.session_state.flash = None
    log.info("Loaded %d students (%d recycled control numbers)", len(students), len(deleted))


def registry() -> Registry:
    return st.session_state.registry


def show_result(result: actions.ActionResult | None):
    """Keep the message across st.rerun() and show it on the next run."""
    if result is None:
        return
    st.session_state.flash = (result.severity, result.message)
    if result.ok:
        st.rerun()
    render_flash()


def render_flash():
    flash = st.session_state.get("flash")
    if not flash:
        return
    severity, message = flash
    if severity == actions.SUCCESS:
        st.success(message)
    else:
        st.error(message)
    st.session_state.flash = None


def stat_metrics(stats):
    c1, c2 = st.columns(2)
    c1.metric("Total members", stats.total_members)
    c2.metric("Total revenue", format_revenue(stats.total_revenue))


# ---------- Pages ----------

def home_page():
    st.header("🏠 Home")
    render_flash()

    stat_metrics(calculate_stats(registry().students))
    st.divider()

    st.subheader("➕ Register Student")
    with st.form("registration_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Full name")
            student_number = st.text_input("Student number")
        with col2:
            school_year = st.selectbox("Year level", options=[""] + list(YEAR_LEVELS))
            fee = st.text_input("Membership fee", value=str(DEFAULT_MEMBERSHIP_FEE))
        submitted = st.form_submit_button("Register Student", type="primary")

    if submitted:
        result = st.session_state.guard.run(
            actions.register_student, registry(), name, student_number, school_year, fee
        )
        show_result(result)


def edit_form(student):
    st.subheader(f"✏️ Edit Student ({student.control_number})")
    with st.form("edit_form"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Full name", value=student.name)
            student_number = st.text_input("Student number", value=student.student_number)
        with col2:
            years = list(YEAR_LEVELS)
            school_year = st.selectbox(
                "Year level",
                options=years,
                index=(years.index(student.school_year) if student.school_year in years else 0),
            )
            fee = st.text_input("Membership fee", value=utils.format_fee(student.membership_fee))
        submitted = st.form_submit_button("Update Student", type="primary")

    if submitted:
        result = st.session_state.guard.run(
            actions.update_student, registry(), student.id, name, student_number, school_year, fee
        )
        if result is not None and result.ok:
            st.session_state.edit_student_id = None
        show_result(result)

    if st.button("Cancel edit"):
        st.session_state.edit_student_id = None
        st.rerun()


def members_page():
    st.header("👥 Members")
    render_flash()

    flt: FilterState = st.session_state.filter
    with st.sidebar:
        st.subheader("Search & Filters")
        flt.search = st.text_input("Search (name/student no./control no.)", value=flt.search)
        year_options = ["All"] + list(YEAR_LEVELS)
        chosen = st.selectbox(
            "Year level", year_options, index=year_options.index(flt.year) if flt.year else 0
        )
        flt.year = "" if chosen == "All" else chosen

    students = filter_students(registry().students, flt)
    df = students_to_frame(students)
    st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)

    st.divider()

    if not students:
        st.caption("No students match the current filters.")
        return

    options = {f"{s.control_number} - {s.name} ({s.student_number})": s.id for s in students}
    col_a, col_b = st.columns([2, 1])
    with col_a:
        chosen_label = st.selectbox("Select student", ["(none)"] + list(options.keys()))
    with col_b:
        if chosen_label != "(none)":
            student_id = options[chosen_label]
            if st.button("Edit"):
                st.session_state.edit_student_id = student_id
                st.rerun()
            delete_confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
            if st.button("Delete", type="secondary", disabled=not delete_confirm):
                show_result(actions.delete_student(registry(), student_id))

    edit_id = st.session_state.get("edit_student_id")
    if edit_id:
        try:
            edit_form(registry().get(edit_id))
        except NotFoundError:
            st.session_state.edit_student_id = None


def statistics_page():
    st.header("📊 Statistics")
    render_flash()

    flt: FilterState = st.session_state.filter
    if flt.search or flt.year:
        st.caption(f"Filtered view: search='{flt.search}' year='{flt.year or 'All'}'")

    stats = calculate_stats(filter_students(registry().students, flt))
    stat_metrics(stats)

    st.subheader("Members per year level")
    st.bar_chart(year_counts_frame(stats))


def data_page():
    st.header("🗂️ Data")
    render_flash()

    st.subheader("Export to CSV")
    st.caption("Exports the students matching the current search and year filter.")
    result = actions.export_csv(registry(), st.session_state.filter)
    if result.ok:
        filename, data = result.payload
        st.download_button(f"Download {filename}", data=data, file_name=filename, mime="text/csv")
    else:
        st.caption(result.message)

    st.divider()

    st.subheader("Import from CSV")
    uploaded = st.file_uploader("CSV file", type=["csv"])
    if uploaded is not None:
        replace_confirm = st.checkbox("Replace all current data with this file", value=False)
        if st.button("Load file", type="primary", disabled=not replace_confirm):
            show_result(actions.import_csv(registry(), uploaded.name, uploaded.getvalue(), uploaded.type))

    st.divider()

    st.subheader("Danger zone")
    c1, c2 = st.columns(2)
    with c1:
        confirm_all = st.checkbox("Confirm delete all", value=False)
        if st.button("Delete all students", disabled=not confirm_all):
            show_result(actions.delete_all_students(registry()))
    with c2:
        confirm_clear = st.checkbox("Confirm clear storage", value=False)
        if st.button("Clear storage", disabled=not confirm_clear):
            show_result(actions.clear_storage(registry()))


def settings_page():
    st.header("⚙️ Settings")
    render_flash()

    st.subheader("Sample data")
    st.caption("Register a few sample students (skips student numbers already present).")
    if st.button("Insert sample data"):
        show_result(actions.insert_sample_data(registry()))

    st.caption(f"Storage file: {db.DB_FILE}")


def main_app():
    st.sidebar.title("🎓 Membership")

    pages = {
        "Home": home_page,
        "Members": members_page,
        "Statistics": statistics_page,
        "Data": data_page,
        "Settings": settings_page,
    }
    names = list(pages.keys())
    if "page" not in st.session_state:
        st.session_state.page = "Home"
    st.session_state.page = st.sidebar.radio("Navigate", names, index=names.index(st.session_state.page))

    pages[st.session_state.page]()


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
