"""
================================================================================
PUNCH ATTENDANCE MONITOR
================================================================================
Streamlit dashboard over the punch attendance pipeline: upload a biometric
export, review employee summaries, the monthly presence matrix and analytics,
declare holidays or team events and download Excel / PDF reports.
================================================================================
"""

import streamlit as st
import pandas as pd
from datetime import datetime, date
from typing import Dict, List, Optional, Tuple

from punch_attendance.analytics import (
    daily_trend,
    headline_metrics,
    late_patterns,
    status_distribution,
    top_performers,
    trend_window,
)
from punch_attendance.calendar_overrides import ROW_BANNER, OverrideRegistry, resolve_rows
from punch_attendance.charts import (
    plot_daily_trend,
    plot_late_patterns,
    plot_status_distribution,
    plot_top_performers,
)
from punch_attendance.config import Config, configure_logging
from punch_attendance.exceptions import AttendanceError
from punch_attendance.exporters import export_excel, export_pdf
from punch_attendance.matrix import FILTER_OPTIONS, build_matrix
from punch_attendance.models import (
    AttendanceMatrix,
    EventOverride,
    NormalizedBatch,
    summaries_to_frame,
)
from punch_attendance.reader import load_attendance
from punch_attendance.reporting import summary_rows, tabular_rows

configure_logging()

OVERRIDE_TYPES = ['Holiday', 'Leave', 'Team Outing', 'Team Event', 'Training']

# ============================================================================
# DATA LOADING (CACHED)
# ============================================================================

@st.cache_data(show_spinner=False)
def load_upload(payload: bytes, filename: str, late_cutoff: int) -> NormalizedBatch:
    """Complete pipeline for one uploaded workbook"""
    return load_attendance(payload, filename, late_cutoff)


@st.cache_data(show_spinner=False)
def get_matrix(_batch: NormalizedBatch, batch_key: str, filters: Tuple[Tuple[str, str], ...]) -> AttendanceMatrix:
    return build_matrix(_batch.records, dict(filters))


def get_registry() -> OverrideRegistry:
    if "overrides" not in st.session_state:
        st.session_state.overrides = OverrideRegistry()
    return st.session_state.overrides


# ============================================================================
# VISUALIZATION HELPERS
# ============================================================================

def create_metric_card(label: str, value, delta=None, help_text=None):
    """Create a styled metric card"""
    col = st.container()
    with col:
        if delta:
            st.metric(label=label, value=value, delta=delta, help=help_text)
        else:
            st.metric(label=label, value=value, help=help_text)


def matrix_frame(matrix: AttendanceMatrix, overrides: List[EventOverride]) -> pd.DataFrame:
    """Display table for the matrix view; banner rows repeat the label across columns"""
    rows = []
    for display in resolve_rows(matrix, overrides):
        if display.kind == ROW_BANNER:
            values = [display.label] * len(matrix.employees)
        else:
            values = [cell.text for cell in display.cells]
        rows.append([display.date, *values])
    return pd.DataFrame(rows, columns=['Date', *matrix.employees])


def style_matrix_cell(value: str) -> str:
    text = str(value)
    if text == 'ABSENT' or text == 'Half Day':
        return 'background-color: #fee2e2; color: #991b1b; font-weight: 600'
    if text == 'WFH':
        return 'background-color: #fef9c3'
    if text.endswith(('AM', 'PM')):
        return 'color: #166534; font-weight: 600'
    if text and text != '-' and text.isupper():
        return 'background-color: #ede9fe; color: #5b21b6; font-style: italic'
    return ''


# ============================================================================
# SECTIONS
# ============================================================================

def render_stats(batch: NormalizedBatch):
    stats = batch.team_stats
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        create_metric_card("Total Employees", stats.total_employees)
    with col2:
        create_metric_card("Present", stats.present)
    with col3:
        create_metric_card("Absent", stats.absent)
    with col4:
        create_metric_card("Late Arrivals", stats.late, help_text="In-time after the late cutoff")


def render_override_manager(registry: OverrideRegistry):
    st.sidebar.markdown("---")
    st.sidebar.subheader("\U0001F389 Holidays & Events")

    with st.sidebar.form("override_form", clear_on_submit=True):
        event_date = st.date_input("Date", value=date.today())
        label = st.text_input("Label", placeholder="e.g. Republic Day")
        event_type = st.selectbox("Type", OVERRIDE_TYPES)
        submitted = st.form_submit_button("Add Event")

    if submitted:
        try:
            registry.add(EventOverride.from_dict({'date': event_date.isoformat(), 'label': label, 'type': event_type}))
            st.sidebar.success(f"Added {label.strip()} on {event_date:%d %b %Y}")
        except AttendanceError as e:
            st.sidebar.error(str(e))

    for override in registry.as_list():
        col1, col2 = st.sidebar.columns([4, 1])
        with col1:
            st.write(f"**{override.date}** {override.label} ({override.category})")
        with col2:
            if st.button("✖", key=f"remove_{override.date}"):
                registry.remove(override.date)
                st.rerun()


def render_summary(batch: NormalizedBatch):
    st.subheader("\U0001F465 Employee Summary")
    summary_df = pd.DataFrame(summary_rows(batch.summaries))
    st.dataframe(summary_df, use_container_width=True, hide_index=True)

    with st.expander("Attendance Records"):
        st.dataframe(pd.DataFrame(tabular_rows(batch.records)), use_container_width=True, height=400)


def render_matrix(batch: NormalizedBatch, batch_key: str, overrides: List[EventOverride]) -> AttendanceMatrix:
    st.subheader("\U0001F5D3 Monthly Matrix")

    employees = sorted(summaries_to_frame(batch.summaries)['name'].dropna().unique().tolist())
    filters: Dict[str, str] = {}
    with st.expander("Column Filters"):
        columns = st.columns(4)
        for idx, name in enumerate(employees):
            with columns[idx % 4]:
                filters[name] = st.selectbox(name, FILTER_OPTIONS, key=f"filter_{name}")

    matrix = get_matrix(batch, batch_key, tuple(sorted(filters.items())))
    if matrix.is_empty:
        st.info("No records match the current filters.")
        return matrix

    frame = matrix_frame(matrix, overrides)
    st.dataframe(
        frame.style.map(style_matrix_cell, subset=matrix.employees),
        use_container_width=True,
        hide_index=True,
        height=600
    )
    return matrix


def render_analytics(batch: NormalizedBatch):
    st.subheader("\U0001F4C8 Analytics")

    metrics = headline_metrics(batch.records, batch.summaries)
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        trend_info = metrics['trend']
        create_metric_card(
            "Avg Attendance",
            f"{metrics['avg_attendance_rate']:.1f}%",
            delta=f"{trend_info['direction']} {trend_info['percentage']:.1f}%" if trend_info['trend'] != 'stable' else None
        )
    with col2:
        create_metric_card("Avg Late / Day", f"{metrics['avg_late_per_day']:.1f}")
    with col3:
        create_metric_card("Best Day", metrics['best_day'], help_text=f"{metrics['best_day_present']} present")
    with col4:
        create_metric_card("Workforce", metrics['total_employees'])

    range_key = st.radio("Range", list(Config.TREND_WINDOWS.keys()), index=3, horizontal=True)
    start, end = trend_window(batch.records, range_key)

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        fig = plot_daily_trend(daily_trend(batch.records, start, end))
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.caption("No dated records in the selected range.")
    with chart_col2:
        fig = plot_status_distribution(status_distribution(batch.summaries))
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)

    chart_col3, chart_col4 = st.columns(2)
    with chart_col3:
        fig = plot_late_patterns(late_patterns(batch.records))
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.caption("No late arrivals recorded.")
    with chart_col4:
        fig = plot_top_performers(top_performers(batch.summaries))
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)


def render_downloads(batch: NormalizedBatch, matrix: AttendanceMatrix, overrides: List[EventOverride]):
    st.sidebar.markdown("---")
    st.sidebar.subheader("\U0001F4E5 Export Reports")
    stamp = datetime.now().strftime('%Y%m%d')

    st.sidebar.download_button(
        label="Download Excel Report",
        data=export_excel(batch.summaries, matrix, overrides, records=batch.records),
        file_name=f"attendance_report_{stamp}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    st.sidebar.download_button(
        label="Download PDF Report",
        data=export_pdf(batch.summaries, matrix, overrides, records=batch.records),
        file_name=f"attendance_report_{stamp}.pdf",
        mime="application/pdf"
    )


# ============================================================================
# MAIN APPLICATION
# ============================================================================

def main():
    st.set_page_config(
        page_title="Punch Attendance Monitor",
        page_icon="\U0001F552",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    st.markdown("""
        <style>
        .main > div {padding-top: 2rem;}
        .stMetric {
            background-color: #ffffff;
            padding: 20px;
            border-radius: 8px;
            border: 1px solid #e0e0e0;
            box-shadow: 0 2px 4px rgba(0,0,0,0.08);
        }
        .stMetric label {
            color: #4f46e5;
            font-weight: 600;
        }
        h1, h2, h3 {
            color: #4f46e5;
        }
        </style>
    """, unsafe_allow_html=True)

    st.title("\U0001F552 " + Config.REPORT_BRAND.title())
    st.markdown("**Biometric punch exports turned into summaries, matrices and reports**")
    st.markdown("---")

    st.sidebar.subheader("\U0001F4CA Data Source")
    uploaded_file = st.sidebar.file_uploader("Upload Punch Export", type=['xlsx', 'xls'])

    if uploaded_file is None:
        st.info("Welcome! Please upload a biometric attendance export (.xlsx or .xls) in the sidebar.")
        st.stop()

    payload = uploaded_file.getvalue()
    try:
        with st.spinner("Reading and normalizing attendance data..."):
            batch = load_upload(payload, uploaded_file.name, Config.late_cutoff_minutes())
    except AttendanceError as e:
        st.error(str(e))
        st.stop()

    if not batch.records:
        st.info("No attendance data found in the uploaded file.")
        st.stop()

    registry = get_registry()
    render_override_manager(registry)
    overrides = registry.as_list()

    render_stats(batch)
    st.markdown("---")

    view = st.radio("View", ["Summary", "Matrix", "Analytics"], horizontal=True)
    batch_key = f"{uploaded_file.name}:{uploaded_file.file_id}"
    matrix: Optional[AttendanceMatrix] = None

    if view == "Summary":
        render_summary(batch)
    elif view == "Matrix":
        matrix = render_matrix(batch, batch_key, overrides)
    else:
        render_analytics(batch)

    if matrix is None:
        matrix = get_matrix(batch, batch_key, ())
    render_downloads(batch, matrix, overrides)

    st.markdown("---")
    st.markdown("""
        <div style='text-align: center; color: #666; padding: 20px;'>
            <p><strong>Punch Attendance Monitor v1.0</strong></p>
            <p>Powered by Streamlit | Data processed with Pandas & Plotly</p>
        </div>
    """, unsafe_allow_html=True)

# ============================================================================
# RUN APPLICATION
# ============================================================================

if __name__ == "__main__":
    main()
