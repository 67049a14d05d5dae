import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, time
from uuid import uuid4

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from fintrack.config import load_settings
from fintrack.domain import (
    ALL,
    CATEGORIES_BY_TYPE,
    DAY,
    DIVISIONS,
    EXPENSE,
    GRANULARITIES,
    INCOME,
    MONTH,
    WEEK,
    FilterSet,
    Transaction,
    exact_amount,
)
from fintrack.events import event_bus
from fintrack.export import format_date
from fintrack.logging_setup import configure_logging, get_logger
from fintrack.services import DashboardService, JsonFileSource, UserContext

settings = load_settings()
configure_logging(settings.log_level)
logger = get_logger("fintrack.app")
tz = settings.tz

st.set_page_config(page_title="FinTrack", layout="wide")

GRANULARITY_LABELS = {DAY: "Daily", WEEK: "Weekly", MONTH: "Monthly"}
EMPTY_FILTERS = {
    "f_division": ALL,
    "f_type": ALL,
    "f_category": ALL,
    "f_start": None,
    "f_end": None,
}

st.sidebar.markdown("### 👤 Profile")
nickname = st.sidebar.text_input("Name", value=st.session_state.get("nickname", ""))
st.session_state["nickname"] = nickname
user = UserContext(name=nickname.strip()) if nickname.strip() else None

if user is None:
    st.title("FinTrack")
    st.info("Enter your name in the sidebar to open the dashboard.")
    st.stop()

st.sidebar.caption(f"Hello, {user.first_name}!")

if "service" not in st.session_state or st.session_state.service.user != user:
    if "service" in st.session_state:
        st.session_state.service.close()
    st.session_state.service = DashboardService(
        JsonFileSource(settings.data_path), user, bus=event_bus, tz=tz
    )
service: DashboardService = st.session_state.service

for key, value in EMPTY_FILTERS.items():
    st.session_state.setdefault(key, value)


def reset_filters():
    for key, value in EMPTY_FILTERS.items():
        st.session_state[key] = value


def _iso(d) -> str:
    return d.isoformat() if d else ""


def money(value) -> str:
    return f"₹ {value:,.0f}" if float(value).is_integer() else f"₹ {value:,.2f}"


all_transactions = service.transactions()
known_categories = sorted({t.category for t in all_transactions if t.category})

# --- Filters
st.sidebar.markdown("### 🔎 Filters")
st.sidebar.selectbox("Division", [ALL, *DIVISIONS], key="f_division")
st.sidebar.selectbox("Type", [ALL, INCOME, EXPENSE], key="f_type")
st.sidebar.selectbox("Category", [ALL, *known_categories], key="f_category")
st.sidebar.date_input("From", key="f_start")
st.sidebar.date_input("To", key="f_end")
st.sidebar.button("🔄 Reset filters", on_click=reset_filters)

filters = FilterSet(
    division=st.session_state.f_division,
    type=st.session_state.f_type,
    category=st.session_state.f_category,
    start_date=_iso(st.session_state.f_start),
    end_date=_iso(st.session_state.f_end),
)

st.title("💰 FinTrack")

granularity = st.radio(
    "Trend resolution",
    GRANULARITIES,
    index=GRANULARITIES.index(settings.default_granularity),
    format_func=GRANULARITY_LABELS.get,
    horizontal=True,
)
breakdown_type = st.radio(
    "Breakdown",
    [EXPENSE, INCOME],
    format_func=str.capitalize,
    horizontal=True,
)

view = service.view(filters, granularity, breakdown_type)

# --- Summary cards
k1, k2, k3 = st.columns(3)
with k1:
    st.metric("Total Balance", money(view.summary.balance))
with k2:
    st.metric("Total Income", money(view.summary.income))
with k3:
    st.metric("Total Expense", money(view.summary.expense))

# --- Charts
c1, c2 = st.columns(2)
with c1:
    st.subheader("Income vs Expense")
    if view.series:
        labels = [b.label for b in view.series]
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Scatter(
            x=labels, y=[float(b.income_total) for b in view.series],
            mode="lines+markers", name="Income", fill="tozeroy", line=dict(color="#10b981"),
        ))
        fig_ts.add_trace(go.Scatter(
            x=labels, y=[float(b.expense_total) for b in view.series],
            mode="lines+markers", name="Expense", fill="tozeroy", line=dict(color="#ef4444"),
        ))
        fig_ts.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)
    else:
        st.info("No transactions in the selected range.")

with c2:
    st.subheader(f"{breakdown_type.capitalize()} Breakdown")
    if view.category_breakdown:
        df_cat = pd.DataFrame(
            [{"Category": s.category, "Total": float(s.total)} for s in view.category_breakdown]
        )
        fig_cat = px.pie(df_cat, values="Total", names="Category", hole=0.5, template="plotly_dark")
        fig_cat.update_traces(sort=False)
        st.plotly_chart(fig_cat, use_container_width=True)
    else:
        st.info(f"No {breakdown_type} data found.")

# --- Add transaction
with st.expander("➕ Add New Transaction"):
    kind = st.radio("Type", [EXPENSE, INCOME], format_func=str.capitalize, horizontal=True, key="new_type")
    with st.form("input_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input("Amount", min_value=0.0, step=100.0, format="%.2f")
            on_date = st.date_input("Date")
        with col2:
            category = st.selectbox("Category", CATEGORIES_BY_TYPE[kind])
            division = st.selectbox("Division", DIVISIONS, index=DIVISIONS.index("Personal"))
        description = st.text_input("Description (optional)")
        submitted = st.form_submit_button("Add Transaction")

    if submitted:
        new_tx = Transaction(
            id=str(uuid4()),
            amount=exact_amount(amount),
            type=kind,
            category=category,
            division=division,
            date=datetime.combine(on_date, time.min, tzinfo=tz).isoformat(),
            description=description or "",
        )
        result = service.add(new_tx)
        if result.is_right():
            st.success("Transaction added")
            st.rerun()
        else:
            st.error(result.get_error()["message"])

# --- Transactions list
st.subheader(f"🧾 {len(view.filtered)} Transactions Found")

if view.filtered:
    df = pd.DataFrame([
        {
            "Date": format_date(t.date, tz),
            "Category": t.category,
            "Description": t.description,
            "Amount": ("+ " if t.type == INCOME else "- ") + money(t.amount),
            "Division": t.division,
        }
        for t in view.filtered
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.download_button(
        "⬇ Export CSV",
        service.export_csv(filters),
        file_name="financial_report.csv",
        mime="text/csv",
    )

    with st.expander("🗑 Delete a transaction"):
        options = {f"{format_date(t.date, tz)} · {t.category} · {money(t.amount)} · {t.id[:8]}": t.id for t in view.filtered}
        choice = st.selectbox("Transaction", list(options))
        if st.button("Delete", type="primary"):
            try:
                service.delete(options[choice])
            except KeyError:
                logger.warning("Delete of unknown transaction %s", options[choice])
                st.error("Transaction no longer exists")
            else:
                st.success("Transaction removed")
                st.rerun()
else:
    st.info("No transactions found matching your filters.")
    st.button("Clear all filters", on_click=reset_filters, key="clear_empty")
