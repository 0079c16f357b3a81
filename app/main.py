import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from tracker.analytics import category_breakdown, monthly_trends, orphaned_transactions
from tracker.config import configure_logging, load_settings
from tracker.domain import EXPENSE, INCOME, MONTHLY, NONE, WEEKLY, YEARLY
from tracker.formatting import format_currency, format_date, month_name
from tracker.dates import current_month_key, next_recurrence_date
from tracker.store import FinanceStore
from tracker.summary import near_limit, over_budget, remaining, savings_rate
from tracker.transforms import load_seed

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("tracker.app")

st.set_page_config(page_title="Finance Tracker", layout="wide")


def money(x: float) -> str:
    return format_currency(x, settings.currency)


if "store" not in st.session_state:
    categories, transactions = load_seed(settings.seed_path)
    store = FinanceStore(categories, transactions)
    created = store.process_recurring_transactions()
    if created:
        logger.info("Booked %d recurring transactions on load", len(created))
    st.session_state.store = store

store: FinanceStore = st.session_state.store
summary = store.summary
category_by_id = {c.id: c for c in store.categories}

menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "🧾 Transactions", "📊 Analytics", "🗂 Categories"])
st.sidebar.caption(month_name(current_month_key()))

if menu == "🏠 Dashboard":
    over = over_budget(summary)
    near = near_limit(summary, settings.budget_warning)
    if over:
        st.error(f"{len(over)} categor{'y is' if len(over) == 1 else 'ies are'} over budget")
    if near:
        st.warning(f"{len(near)} categor{'y is' if len(near) == 1 else 'ies are'} approaching budget limit")

    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total Balance", money(summary.balance))
    with k2:
        st.metric("Monthly Income", money(summary.monthly_income))
    with k3:
        st.metric("Monthly Expenses", money(summary.monthly_expenses))
    with k4:
        st.metric("Monthly Savings", money(summary.savings), delta=f"{savings_rate(summary):.1f}% savings rate")

    if summary.budget_status:
        st.subheader("Budget Status")
        for status in summary.budget_status:
            cat = category_by_id.get(status.category_id)
            label = cat.name if cat else status.category_id
            st.markdown(f"**{label}** {money(status.spent)} / {money(status.budget)}")
            st.progress(min(status.percentage, 100) / 100, text=f"{status.percentage:.1f}% used")
            if status.percentage > 100:
                st.caption(f"{money(-remaining(status))} over budget")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.form("add_transaction", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        with c1:
            kind = st.selectbox("Type", [EXPENSE, INCOME])
            amount = st.number_input("Amount", min_value=0.01, value=10.0, step=1.0)
        with c2:
            names = [c.name for c in store.categories if c.type == kind]
            category = st.selectbox("Category", names)
            when = st.date_input("Date", value=date.today())
        with c3:
            description = st.text_input("Description")
            recurring = st.selectbox("Recurring", [NONE, WEEKLY, MONTHLY, YEARLY])
        submitted = st.form_submit_button("Add")

    if submitted:
        fields = {
            "type": kind,
            "amount": float(amount),
            "category": category or "",
            "description": description,
            "date": when.isoformat(),
            "recurring": recurring,
            "next_due": next_recurrence_date(when.isoformat(), recurring) if recurring != NONE else None,
        }
        result = store.try_add_transaction(fields)
        if result.is_left():
            st.warning(result.get_error()["message"])
        else:
            st.rerun()

    if store.transactions:
        df = pd.DataFrame([
            {
                "id": t.id,
                "date": format_date(t.date),
                "type": t.type,
                "category": t.category,
                "description": t.description,
                "amount": money(t.amount if t.type == INCOME else -t.amount),
                "recurring": t.recurring or NONE,
                "next due": t.next_due or "-",
            }
            for t in store.transactions
        ])
        st.dataframe(df, use_container_width=True, hide_index=True)

        to_delete = st.selectbox("Delete transaction", [""] + [t.id for t in store.transactions])
        if to_delete and st.button("Delete"):
            store.delete_transaction(to_delete)
            st.rerun()
    else:
        st.info("No transactions yet.")

    orphans = orphaned_transactions(store.transactions, store.categories)
    if orphans:
        st.warning(f"{len(orphans)} transactions reference a missing category")

elif menu == "📊 Analytics":
    st.title("📊 Analytics")

    col_e, col_i = st.columns(2)
    for col, kind, title in ((col_e, EXPENSE, "Monthly Expenses by Category"),
                             (col_i, INCOME, "Monthly Income by Category")):
        with col:
            rows = category_breakdown(store.transactions, store.categories, kind)
            if rows:
                df_cat = pd.DataFrame(rows)
                fig = px.pie(df_cat, values="amount", names="name", title=title,
                             color="name", color_discrete_map={r.name: r.color for r in rows})
                st.plotly_chart(fig, use_container_width=True)
            else:
                st.info(f"No {kind} this month")

    trends = pd.DataFrame(monthly_trends(store.transactions, months=6))
    fig_ts = go.Figure()
    fig_ts.add_trace(go.Bar(x=trends["month"], y=trends["income"], name="Income"))
    fig_ts.add_trace(go.Bar(x=trends["month"], y=trends["expenses"], name="Expenses"))
    fig_ts.update_layout(barmode="group", title="Last 6 months", margin=dict(t=40, b=10, l=10, r=10))
    st.plotly_chart(fig_ts, use_container_width=True)

elif menu == "🗂 Categories":
    st.title("🗂 Categories")

    df_cats = pd.DataFrame([
        {"id": c.id, "name": c.name, "type": c.type, "budget": money(c.budget) if c.budget else "-"}
        for c in store.categories
    ])
    st.dataframe(df_cats, use_container_width=True, hide_index=True)

    with st.form("add_category", clear_on_submit=True):
        name = st.text_input("Name")
        kind = st.selectbox("Type", [EXPENSE, INCOME])
        color = st.color_picker("Color", "#6366F1")
        budget = st.number_input("Monthly budget (0 for none)", min_value=0.0, value=0.0)
        if st.form_submit_button("Add category") and name:
            store.add_category({"name": name, "type": kind, "color": color,
                                "budget": budget if budget > 0 else None})
            st.rerun()

    selected = st.selectbox("Edit category", [c.id for c in store.categories],
                            format_func=lambda cid: category_by_id[cid].name)
    if selected:
        cat = category_by_id[selected]
        new_name = st.text_input("Rename", value=cat.name, key=f"rename_{selected}")
        new_budget = st.number_input("Budget", min_value=0.0, value=float(cat.budget or 0),
                                     key=f"budget_{selected}")
        b1, b2 = st.columns(2)
        with b1:
            if st.button("Save"):
                store.update_category(selected, name=new_name,
                                      budget=new_budget if new_budget > 0 else None)
                st.rerun()
        with b2:
            if st.button("Delete category"):
                store.delete_category(selected)
                st.rerun()
