from typing import Dict, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

STATUS_COLORS = {
    'present': '#22c55e',
    'late': '#f59e0b',
    'absent': '#ef4444',
}

LATE_BUCKET_COLORS = {
    'early': '#fde68a',
    'medium': '#f59e0b',
    'severe': '#b45309',
}

# ============================================================================
# VISUALIZATION FUNCTIONS
# ============================================================================

def plot_daily_trend(trend_df: pd.DataFrame) -> Optional[go.Figure]:
    """Present / late / absent counts per day"""
    if trend_df is None or trend_df.empty:
        return None

    fig = go.Figure()
    for column, label in (('present', 'Present'), ('late', 'Late'), ('absent', 'Absent')):
        fig.add_trace(go.Scatter(
            x=trend_df['date'], y=trend_df[column],
            mode='lines+markers', name=label,
            line=dict(color=STATUS_COLORS[column]),
            fill='tozeroy' if column == 'present' else None
        ))

    fig.update_layout(
        title='Daily Attendance Trend',
        xaxis_title='Date',
        yaxis_title='Employees',
        height=400,
        hovermode='x unified',
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)'
    )
    return fig


def plot_status_distribution(distribution: Dict[str, int]) -> Optional[go.Figure]:
    if not distribution or sum(distribution.values()) == 0:
        return None

    frame = pd.DataFrame({
        'Status': [key.title() for key in distribution],
        'Count': list(distribution.values()),
    })
    fig = px.pie(
        frame,
        names='Status',
        values='Count',
        title='Status Distribution',
        color='Status',
        color_discrete_map={key.title(): color for key, color in STATUS_COLORS.items()},
        hole=0.45
    )
    fig.update_layout(height=400)
    return fig


def plot_late_patterns(patterns_df: pd.DataFrame) -> Optional[go.Figure]:
    """Stacked late arrivals per weekday by severity"""
    if patterns_df is None or patterns_df.empty:
        return None
    if int(patterns_df[['early', 'medium', 'severe']].to_numpy().sum()) == 0:
        return None

    long_df = patterns_df.melt(id_vars='day', var_name='Severity', value_name='Late Arrivals')
    fig = px.bar(
        long_df,
        x='day',
        y='Late Arrivals',
        color='Severity',
        title='Late Arrival Patterns by Weekday',
        labels={'day': 'Day'},
        color_discrete_map=LATE_BUCKET_COLORS
    )
    fig.update_layout(
        barmode='stack',
        height=400,
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)'
    )
    return fig


def plot_top_performers(performers_df: pd.DataFrame) -> Optional[go.Figure]:
    """Horizontal bar chart of the best attendance rates"""
    if performers_df is None or performers_df.empty:
        return None

    fig = px.bar(
        performers_df.iloc[::-1],
        y='name',
        x='attendance_rate',
        orientation='h',
        title=f'Top {len(performers_df)} Employees by Attendance Rate',
        labels={'attendance_rate': 'Attendance %', 'name': 'Employee'},
        color='attendance_rate',
        color_continuous_scale='Viridis'
    )
    fig.update_layout(height=400, showlegend=False)
    return fig
