import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import plotly.express as px

from tracker.advice import AdviceService
from tracker.config import settings
from tracker.dates import current_month_str, format_date, today
from tracker.domain import EXPENSE, INCOME, categories_for, sub_categories_for
from tracker.errors import ValidationError
from tracker.events import log_handler
from tracker.logging_config import configure_logging
from tracker.records import account_name, record_rows, selected_range
from tracker.store import LedgerStore
from tracker.trends import HALF_YEAR, MONTH, WEEK, YEAR

configure_logging()

st.set_page_config(page_title=settings.APP_NAME, layout="wide")

RANGE_LABELS = {WEEK: "Last 7 days", MONTH: "Last month", HALF_YEAR: "Last 6 months", YEAR: "Last year"}


@st.cache_resource
def get_store() -> LedgerStore:
    store = LedgerStore.open(settings.DATA_DIR)
    store.bus.subscribe_all(log_handler)
    return store


@st.cache_resource
def get_advice_service() -> AdviceService:
    return AdviceService()


store = get_store()
advice_service = get_advice_service()

if "advice" not in st.session_state:
    st.session_state.advice = ""

st.sidebar.markdown("### 💰 My Wealth")
st.sidebar.metric("Net assets", f"{store.net_assets():,.0f}")

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "➕ Add", "🧾 History", "💳 Accounts"],
    index=0 if store.accounts else 3,
)

if menu == "🏠 Dashboard":
    st.title("🏠 Dashboard")
    balances = store.balances()

    if store.accounts:
        cols = st.columns(min(len(store.accounts), 4))
        for idx, acc in enumerate(store.accounts):
            with cols[idx % len(cols)]:
                st.metric(acc.name, f"{balances.get(acc.id, 0):,.0f}")
    else:
        st.info("No virtual accounts yet, create one under 💳 Accounts.")

    st.subheader("✨ Monthly insight")
    if st.button("Refresh advice", disabled=not store.accounts or advice_service.busy):
        with st.spinner("Counting..."):
            st.session_state.advice = asyncio.run(
                advice_service.get_advice(store.transactions, store.accounts, current_month_str())
            )
    if st.session_state.advice:
        for line in st.session_state.advice.splitlines():
            if line.strip():
                st.markdown(f"- {line.strip()}")
    else:
        st.caption("Press the button and let your finance buddy have a look at this month.")

    st.subheader("📈 Assets and cash flow")
    monthly = store.monthly()
    if monthly:
        df_month = pd.DataFrame([p.__dict__ for p in monthly])
        fig_assets = px.area(
            df_month, x="month", y="total_assets",
            labels={"month": "Month", "total_assets": "Total assets"},
            template="plotly_dark",
        )
        st.plotly_chart(fig_assets, use_container_width=True)

        fig_flow = go.Figure()
        fig_flow.add_trace(go.Bar(x=df_month["month"], y=df_month["income"], name="Income"))
        fig_flow.add_trace(go.Bar(x=df_month["month"], y=df_month["expense"], name="Expense"))
        fig_flow.update_layout(barmode="group", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_flow, use_container_width=True)
    else:
        st.info("No transactions to chart yet.")

    if store.accounts:
        st.subheader("📊 Account trend")
        c1, c2 = st.columns(2)
        with c1:
            acc_id = st.selectbox(
                "Account", [a.id for a in store.accounts],
                format_func=lambda i: account_name(store.accounts, i),
            )
        with c2:
            range_key = st.radio("Range", list(RANGE_LABELS), format_func=RANGE_LABELS.get, horizontal=True)
        trend = store.trend(acc_id, range_key)
        df_trend = pd.DataFrame([p.__dict__ for p in trend])
        fig_trend = px.line(df_trend, x="date", y="value", labels={"value": "Balance"}, template="plotly_dark")
        st.plotly_chart(fig_trend, use_container_width=True)

elif menu == "➕ Add":
    st.title("➕ New transaction")
    if not store.accounts:
        st.warning("Create an account first.")
    else:
        type_ = st.radio("Type", [EXPENSE, INCOME], format_func=str.capitalize, horizontal=True)
        main_cat = st.selectbox("Category", ["", *categories_for(type_)])
        subs = sub_categories_for(main_cat) if type_ == EXPENSE else ()

        with st.form("input_form", clear_on_submit=True):
            sub_cat = st.selectbox("Sub-category", ["", *subs]) if subs else ""
            amount = st.text_input("Amount")
            acc_id = st.selectbox(
                "Account", [a.id for a in store.accounts],
                format_func=lambda i: account_name(store.accounts, i),
            )
            date = st.date_input("Date", value=today())
            note = st.text_input("Note")
            submitted = st.form_submit_button("Save")

        if submitted:
            try:
                store.submit_transaction({
                    "date": format_date(date) if date else "",
                    "type": type_,
                    "main_category": main_cat,
                    "sub_category": sub_cat,
                    "amount": amount,
                    "account_id": acc_id,
                    "note": note,
                })
            except ValidationError as e:
                st.error(f"Please fill in everything: {e}")
            else:
                st.success("Saved! ✨")

elif menu == "🧾 History":
    st.title("🧾 History")
    use_range = st.checkbox("Filter by date range")
    if use_range:
        date_range = st.date_input("Date range", value=(today(), today()))
        records = store.records(*selected_range(date_range))
        if not date_range:
            st.caption("No range picked, showing today's records.")
    else:
        st.caption("Showing today's records.")
        records = store.records()

    rows = record_rows(records, store.accounts)
    if rows:
        for row in rows:
            c1, c2, c3 = st.columns([4, 2, 1])
            with c1:
                st.markdown(f"**{row['category']}**  \n{row['date']} · {row['account']}")
                if row["note"]:
                    st.caption(row["note"])
            with c2:
                st.markdown(f"{'+' if row['type'] == INCOME else '-'}{abs(row['amount']):,.0f}")
            with c3:
                if st.button("Delete", key=f"del_{row['id']}"):
                    store.delete_transaction(row["id"])
                    st.rerun()
        df = pd.DataFrame(rows).drop(columns=["id"])
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="records.csv", mime="text/csv")
    else:
        st.info("No records yet 🍃")

elif menu == "💳 Accounts":
    st.title("💳 Virtual accounts")
    balances = store.balances()
    for acc in store.accounts:
        c1, c2 = st.columns([5, 1])
        with c1:
            st.markdown(
                f"<span style='color:{acc.color}'>●</span> **{acc.name}** · balance {balances.get(acc.id, 0):,.0f}",
                unsafe_allow_html=True,
            )
        with c2:
            if st.button("🗑", key=f"del_acc_{acc.id}"):
                store.delete_account(acc.id)
                st.rerun()

    with st.form("account_form", clear_on_submit=True):
        st.subheader("New account")
        name = st.text_input("Name")
        initial = st.text_input("Starting balance")
        if st.form_submit_button("Create"):
            try:
                store.submit_account({"name": name, "initial_balance": initial})
            except ValidationError as e:
                st.error(str(e))
            else:
                st.rerun()
