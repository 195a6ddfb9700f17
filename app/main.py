"""
Streamlit Frontend for Finance Tracker

The dashboard a user opens every day to record money going in and out
and to see where the month stands.

DESIGN PRINCIPLES:
1. One glance tells you how the month is going
2. Forms reject bad input with a readable reason
3. Numbers shown are exactly the numbers stored
4. No hidden actions

The UI talks to the same orchestrator flows as the HTTP API, so
every rule (reference checks, period checks) holds here too.
"""

from datetime import date
from decimal import Decimal

import plotly.express as px
import streamlit as st

from finance_tracker.config import validate_all_settings
from finance_tracker.models import (
    AccountType,
    CategoryType,
    CreateAccountRequest,
    CreateCategoryRequest,
    CreateTransactionRequest,
    SpendingStatus,
    TransactionFilter,
    TransactionType,
)
from finance_tracker.orchestrator import DashboardFlow, LedgerFlow, create_app_components
from finance_tracker.queries import category_chart_slices, spending_health
from finance_tracker.services.storage import StorageError
from finance_tracker.validation import LedgerValidationError, LedgerValidator


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


HEALTH_BOXES = {
    SpendingStatus.NO_INCOME: ("info-box", "No income recorded this month yet."),
    SpendingStatus.HEALTHY: ("success-box", "Spending is comfortably below income."),
    SpendingStatus.CLOSE: ("warning-box", "Spending is getting close to income."),
    SpendingStatus.OVERSPENT: ("error-box", "Spending is above income this month."),
}


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def format_money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def label(value) -> str:
    """Enum value → display label ("credit_card" → "Credit Card")."""
    return value.value.replace("_", " ").title()


def show_validation_error(error: LedgerValidationError):
    validator = LedgerValidator()
    st.error(validator.get_user_friendly_summary(error.result))


def main():
    """Main application entry point."""
    try:
        ledger_flow, dashboard_flow, _ = get_components()
    except StorageError as e:
        st.error(f"Failed to open the ledger database: {e}")
        st.stop()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "🧾 Transactions", "🏦 Accounts", "🏷️ Categories", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Getting started:**
        1. Add an account
        2. Add a few categories
        3. Record transactions

        Transfers are recorded but left out of monthly totals.
        """
    )

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(dashboard_flow, ledger_flow)
    elif page == "🧾 Transactions":
        render_transactions_page(ledger_flow)
    elif page == "🏦 Accounts":
        render_accounts_page(ledger_flow)
    elif page == "🏷️ Categories":
        render_categories_page(ledger_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_dashboard_page(dashboard_flow: DashboardFlow, ledger_flow: LedgerFlow):
    """Render the monthly summary."""
    st.title("📊 Dashboard")

    today = date.today()
    col1, col2 = st.columns(2)
    with col1:
        year = st.number_input("Year", min_value=1, max_value=9999, value=today.year, step=1)
    with col2:
        month = st.selectbox("Month", options=list(range(1, 13)), index=today.month - 1)

    try:
        summary = dashboard_flow.monthly_summary(int(year), int(month))
    except LedgerValidationError as e:
        show_validation_error(e)
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_money(summary.total_income))
    col2.metric("Expenses", format_money(summary.total_expenses))
    col3.metric("Net", format_money(summary.net))

    health = spending_health(summary.total_income, summary.total_expenses)
    box, message = HEALTH_BOXES[health.status]
    ratio_text = f" ({health.ratio:.0%} of income spent)" if health.ratio is not None else ""
    st.markdown(f"""
    <div class="{box}">
        <p>{message}{ratio_text}</p>
    </div>
    """, unsafe_allow_html=True)
    if health.ratio is not None:
        st.progress(min(float(health.ratio), 1.0))

    st.markdown("### Spending by Category")
    if not summary.per_category:
        st.info("No expenses recorded for this month.")
        return

    colors = {c.id: c.color for c in ledger_flow.list_categories()}
    slices = category_chart_slices(summary.per_category, colors)
    if slices:
        fig_cat = px.pie(
            names=[s["category"] for s in slices],
            values=[s["total"] for s in slices],
            color=[s["category"] for s in slices],
            color_discrete_map={s["category"]: s["color"] for s in slices},
            hole=0.55,
        )
        fig_cat.update_layout(height=320, margin=dict(t=10, b=10))
        st.plotly_chart(fig_cat, use_container_width=True)

    st.dataframe(
        [
            {
                "Category": item.category_name,
                "Spent": format_money(item.total_expenses),
            }
            for item in summary.per_category
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_transactions_page(ledger_flow: LedgerFlow):
    """Render the transaction form and the filtered list."""
    st.title("🧾 Transactions")

    accounts = ledger_flow.list_accounts()
    categories = ledger_flow.list_categories()

    if not accounts:
        st.info("Add an account first on the 'Accounts' page.")
        return

    account_names = {a.id: a.name for a in accounts}
    category_names = {c.id: c.name for c in categories}

    with st.form("new_transaction", clear_on_submit=True):
        st.markdown("### New Transaction")
        col1, col2 = st.columns(2)
        with col1:
            account_id = st.selectbox(
                "Account",
                options=list(account_names),
                format_func=account_names.get,
            )
            category_id = st.selectbox(
                "Category",
                options=[None] + list(category_names),
                format_func=lambda x: "None" if x is None else category_names[x],
            )
            transaction_type = st.selectbox(
                "Type",
                options=list(TransactionType),
                format_func=label,
            )
        with col2:
            amount = st.text_input("Amount", placeholder="e.g., 42.50")
            occurred_on = st.date_input("Date", value=date.today())
            description = st.text_input("Description")

        submitted = st.form_submit_button("💾 Save Transaction", type="primary")

    if submitted:
        try:
            request = CreateTransactionRequest(
                account_id=account_id,
                category_id=category_id,
                amount=amount,
                transaction_type=transaction_type,
                date=occurred_on,
                description=description or None,
            )
            ledger_flow.create_transaction(request)
            st.success("✅ Transaction saved.")
        except LedgerValidationError as e:
            show_validation_error(e)
        except ValueError as e:
            st.error(f"❌ Please check the form: {e}")

    st.markdown("---")
    st.markdown("### History")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        account_filter = st.selectbox(
            "Filter by Account",
            options=[None] + list(account_names),
            format_func=lambda x: "All Accounts" if x is None else account_names[x],
        )
    with col2:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[None] + list(category_names),
            format_func=lambda x: "All Categories" if x is None else category_names[x],
        )
    with col3:
        date_from = st.date_input("From", value=None)
    with col4:
        date_to = st.date_input("To", value=None)

    try:
        filters = TransactionFilter(
            account_id=account_filter,
            category_id=category_filter,
            date_from=date_from,
            date_to=date_to,
        )
    except ValueError as e:
        st.error(f"❌ {e}")
        return

    transactions = ledger_flow.list_transactions(filters)
    if not transactions:
        st.info("No transactions match these filters.")
        return

    st.dataframe(
        [
            {
                "Date": t.date.isoformat(),
                "Account": account_names.get(t.account_id, ""),
                "Category": category_names.get(t.category_id, "") if t.category_id else "",
                "Type": label(t.transaction_type),
                "Amount": format_money(t.amount),
                "Description": t.description or "",
            }
            for t in transactions
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_accounts_page(ledger_flow: LedgerFlow):
    """Render the account list and form."""
    st.title("🏦 Accounts")

    with st.form("new_account", clear_on_submit=True):
        name = st.text_input("Name")
        account_type = st.selectbox(
            "Type",
            options=list(AccountType),
            index=list(AccountType).index(AccountType.BANK),
            format_func=label,
        )
        initial_balance = st.text_input("Initial Balance", value="0.00")
        submitted = st.form_submit_button("💾 Add Account", type="primary")

    if submitted:
        try:
            ledger_flow.create_account(CreateAccountRequest(
                name=name,
                account_type=account_type,
                initial_balance=initial_balance,
            ))
            st.success(f"✅ Account '{name.strip()}' added.")
        except ValueError as e:
            st.error(f"❌ Please check the form: {e}")

    accounts = ledger_flow.list_accounts()
    if not accounts:
        st.info("No accounts yet.")
        return

    st.dataframe(
        [
            {
                "Name": a.name,
                "Type": label(a.account_type),
                "Initial Balance": format_money(a.initial_balance),
            }
            for a in accounts
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_categories_page(ledger_flow: LedgerFlow):
    """Render the category list and form."""
    st.title("🏷️ Categories")

    with st.form("new_category", clear_on_submit=True):
        name = st.text_input("Name")
        category_type = st.selectbox(
            "Type",
            options=list(CategoryType),
            format_func=label,
        )
        color = st.color_picker("Color", value="#4e79a7")
        submitted = st.form_submit_button("💾 Add Category", type="primary")

    if submitted:
        try:
            ledger_flow.create_category(CreateCategoryRequest(
                name=name,
                category_type=category_type,
                color=color,
            ))
            st.success(f"✅ Category '{name.strip()}' added.")
        except ValueError as e:
            st.error(f"❌ Please check the form: {e}")

    categories = ledger_flow.list_categories()
    if not categories:
        st.info("No categories yet.")
        return

    st.dataframe(
        [
            {
                "Name": c.name,
                "Type": label(c.category_type),
                "Color": c.color or "",
            }
            for c in categories
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Database", "database"),
        ("HTTP API", "api"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Invalid configuration")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Settings are read from environment variables or a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
