"""
Streamlit Frontend for the Bookkeeping Dashboard

Four pages share one pair of session lists (transactions and bills).
They are loaded from the record store once per session; after that every
page reads and changes the session copy.

DESIGN PRINCIPLES:
1. Numbers on screen are always recomputed from the session lists
2. A form is only saved when every field passes validation
3. A save that did not reach the spreadsheet is still shown, with a warning
4. Edits, deletes and status changes stay in this session
"""

import asyncio
from datetime import date

import pandas as pd
import streamlit as st

from bookkeeper.config import get_settings, validate_all_settings
from bookkeeper.formatting import (
    category_style,
    due_label,
    format_currency,
    format_percentage,
    format_signed_amount,
)
from bookkeeper.logging_config import configure_logging
from bookkeeper.models import (
    BILL_CATEGORIES,
    BillDraft,
    BillStatus,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    categories_for,
)
from bookkeeper.orchestrator import (
    BillFlow,
    ReportFlow,
    TransactionFlow,
    create_app_components,
)
from bookkeeper.queries import (
    ALL,
    BILL_SORT_DEFAULT,
    TRANSACTION_SORT_DEFAULT,
    BillFilter,
    BillSortField,
    ReportPeriod,
    TransactionFilter,
    TransactionSortField,
    effective_status,
    export_filename,
    export_transactions_csv,
    health_gauge,
    health_rating,
    health_score,
    is_due_soon,
    last_month_range,
    monthly_series,
    this_month_range,
    toggle_sort,
    unique_categories,
)


# Page configuration
st.set_page_config(
    page_title="Bookkeeping Dashboard",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .warning-box {
        padding: 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


STATUS_ICONS = {
    BillStatus.PENDING: "🟡 Pending",
    BillStatus.PAID: "🟢 Paid",
    BillStatus.OVERDUE: "🔴 Overdue",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(debug=get_settings().app.debug_mode)
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def currency() -> str:
    return get_settings().app.currency_symbol


def ensure_loaded(transaction_flow: TransactionFlow, bill_flow: BillFlow):
    """Fetch both lists the first time a session needs them."""
    if "transactions" not in st.session_state:
        st.session_state.transactions = run_async(transaction_flow.load())
    if "bills" not in st.session_state:
        st.session_state.bills = run_async(bill_flow.load())
    if "transaction_sort" not in st.session_state:
        st.session_state.transaction_sort = TRANSACTION_SORT_DEFAULT
    if "bill_sort" not in st.session_state:
        st.session_state.bill_sort = BILL_SORT_DEFAULT


def show_errors(errors: dict):
    for field, message in errors.items():
        st.error(f"{field.replace('_', ' ').title()}: {message}")


def show_save_outcome(outcome, noun: str):
    if not outcome.result.persisted:
        st.markdown(f"""
        <div class="warning-box">
            <h4>⚠️ Saved in this session only</h4>
            <p>The {noun} could not be written to the spreadsheet:
            {outcome.result.error_message}</p>
        </div>
        """, unsafe_allow_html=True)
    else:
        st.success(f"✅ {noun.title()} saved")


def main():
    """Main application entry point."""
    transaction_flow, bill_flow, report_flow = get_components()
    ensure_loaded(transaction_flow, bill_flow)

    # Sidebar navigation
    st.sidebar.title("📒 Bookkeeping")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "💸 Transactions", "🧾 Due Bills", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Reload from spreadsheet"):
        st.session_state.transactions = run_async(transaction_flow.load())
        st.session_state.bills = run_async(bill_flow.load())
        st.rerun()

    # Route to appropriate page
    if page == "🏠 Dashboard":
        render_dashboard_page(transaction_flow, bill_flow)
    elif page == "💸 Transactions":
        render_transactions_page(transaction_flow)
    elif page == "🧾 Due Bills":
        render_bills_page(bill_flow)
    elif page == "📊 Reports":
        render_reports_page(report_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_dashboard_page(transaction_flow: TransactionFlow, bill_flow: BillFlow):
    """Render the overview page."""
    st.title("🏠 Dashboard")
    symbol = currency()
    transactions = st.session_state.transactions
    bills = st.session_state.bills

    today = date.today()

    stats = transaction_flow.view(transactions, today=today).stats
    bill_summary = bill_flow.view(bills, today=today).stats

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", format_currency(stats.total_income, symbol))
    col2.metric("Total Expenses", format_currency(stats.total_expenses, symbol))
    col3.metric(
        "Net Profit",
        ("" if stats.is_profitable else "-") + format_currency(stats.net_profit, symbol),
    )
    col4.metric("Pending", format_currency(stats.pending_amount, symbol))

    col1, col2, col3 = st.columns(3)
    col1.metric("Outstanding Bills", format_currency(bill_summary.total_outstanding, symbol))
    col2.metric("Overdue", bill_summary.overdue_count)
    col3.metric("Due Soon", bill_summary.due_soon_count)

    st.markdown("---")
    st.subheader("Income vs Expenses")
    series = pd.DataFrame(monthly_series(transactions))
    if not series.empty:
        chart = series.set_index("month")[["income", "expenses"]].astype(float)
        st.bar_chart(chart)

    left, right = st.columns(2)
    with left:
        st.subheader("Recent Transactions")
        recent = TransactionFlow.recent(transactions)
        if not recent:
            st.info("No transactions yet.")
        for t in recent:
            st.markdown(
                f"**{t.description}** · {t.category} · {t.date:%b %d, %Y} "
                f"· {format_signed_amount(t.amount, t.type, symbol)}"
            )

    with right:
        st.subheader("Upcoming Bills")
        upcoming = [
            b for b in bills
            if is_due_soon(b, today, get_settings().app.due_soon_days)
            or effective_status(b, today) == BillStatus.OVERDUE
        ]
        if not upcoming:
            st.info("Nothing due soon.")
        for b in sorted(upcoming, key=lambda b: b.due_date):
            st.markdown(
                f"**{b.title}** · {format_currency(b.amount, symbol)} "
                f"· {due_label(b, today)}"
            )


def render_transactions_page(transaction_flow: TransactionFlow):
    """Render the transactions list, form and bulk actions."""
    st.title("💸 Transactions")
    symbol = currency()

    with st.expander("➕ Add Transaction"):
        render_transaction_form(transaction_flow)

    # Quick date filters must run before the date inputs exist
    col1, col2, col3 = st.columns(3)
    if col1.button("This Month"):
        st.session_state.tx_start, st.session_state.tx_end = this_month_range()
        st.rerun()
    if col2.button("Last Month"):
        st.session_state.tx_start, st.session_state.tx_end = last_month_range()
        st.rerun()
    if col3.button("Clear Filters"):
        for key in ("tx_search", "tx_type", "tx_status", "tx_category", "tx_start", "tx_end"):
            st.session_state.pop(key, None)
        st.rerun()

    transactions = st.session_state.transactions

    col1, col2, col3, col4 = st.columns(4)
    search = col1.text_input("Search", key="tx_search")
    type_filter = col2.selectbox(
        "Type", [ALL] + [t.value for t in TransactionType], key="tx_type",
    )
    status_filter = col3.selectbox(
        "Status", [ALL] + [s.value for s in TransactionStatus], key="tx_status",
    )
    category_filter = col4.selectbox(
        "Category", [ALL] + unique_categories(transactions), key="tx_category",
    )
    col1, col2 = st.columns(2)
    start = col1.date_input("From", value=None, key="tx_start")
    end = col2.date_input("To", value=None, key="tx_end")

    criteria = TransactionFilter(
        search=search,
        type=type_filter,
        status=status_filter,
        category=category_filter,
        start=start,
        end=end,
    )

    # Sorting
    sort = st.session_state.transaction_sort
    cols = st.columns(len(TransactionSortField))
    for col, field in zip(cols, TransactionSortField):
        arrow = ""
        if sort.field == field.value:
            arrow = " ↑" if sort.direction.value == "asc" else " ↓"
        if col.button(f"Sort by {field.value.title()}{arrow}"):
            st.session_state.transaction_sort = toggle_sort(
                sort, field.value, TRANSACTION_SORT_DEFAULT.direction,
            )
            st.rerun()

    view = transaction_flow.view(transactions, criteria, st.session_state.transaction_sort)

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(view.stats.total_income, symbol))
    col2.metric("Expenses", format_currency(view.stats.total_expenses, symbol))
    col3.metric("Showing", f"{len(view.transactions)} of {len(transactions)}")

    if not view.transactions:
        st.info("No transactions match the current filters.")
    else:
        table = pd.DataFrame([
            {
                "Date": t.date.isoformat(),
                "Description": t.description,
                "Category": t.category,
                "Amount": format_signed_amount(t.amount, t.type, symbol),
                "Status": t.status.value.title(),
            }
            for t in view.transactions
        ])
        st.dataframe(
            table.style.map(category_style, subset=["Category"]),
            use_container_width=True,
            hide_index=True,
        )

    st.download_button(
        "⬇️ Export CSV",
        data=export_transactions_csv(view.transactions),
        file_name=export_filename(),
        mime="text/csv",
    )

    # Bulk actions
    st.markdown("---")
    st.subheader("Bulk Actions")
    labels = {t.id: f"{t.date} · {t.description}" for t in view.transactions}
    selected = st.multiselect(
        "Select transactions",
        options=list(labels),
        format_func=lambda i: labels[i],
    )
    col1, col2, col3 = st.columns(3)
    if col1.button("🗑️ Delete", disabled=not selected):
        st.session_state.transactions = transaction_flow.delete(transactions, selected)
        st.rerun()
    if col2.button("✅ Mark Completed", disabled=not selected):
        st.session_state.transactions = transaction_flow.set_status(
            transactions, selected, TransactionStatus.COMPLETED,
        )
        st.rerun()
    if col3.button("⏳ Mark Pending", disabled=not selected):
        st.session_state.transactions = transaction_flow.set_status(
            transactions, selected, TransactionStatus.PENDING,
        )
        st.rerun()

    # Edit
    if view.transactions:
        with st.expander("✏️ Edit Transaction"):
            editing = st.selectbox(
                "Transaction",
                options=list(labels),
                format_func=lambda i: labels[i],
            )
            record = next(t for t in transactions if t.id == editing)
            render_transaction_form(transaction_flow, existing=record)


def render_transaction_form(transaction_flow: TransactionFlow, existing=None):
    """Add form, or edit form when `existing` is given."""
    draft = TransactionDraft.from_record(existing) if existing else TransactionDraft.blank()
    key = f"tx_form_{existing.id if existing else 'new'}"

    transaction_type = st.radio(
        "Type",
        options=list(TransactionType),
        index=list(TransactionType).index(draft.type),
        format_func=lambda x: x.value.title(),
        horizontal=True,
        key=f"{key}_type",
    )
    names = [c.name for c in categories_for(transaction_type)]
    if draft.category and draft.category not in names:
        names.append(draft.category)

    with st.form(key):
        description = st.text_input("Description *", value=draft.description, key=f"{key}_description")
        category = st.selectbox(
            "Category *",
            options=[""] + names,
            index=([""] + names).index(draft.category) if draft.category else 0,
            key=f"{key}_category",
        )
        amount = st.text_input("Amount *", value=draft.amount, key=f"{key}_amount")
        when = st.date_input("Date *", value=draft.parsed_date or date.today(), key=f"{key}_date")
        status = st.selectbox(
            "Status",
            options=list(TransactionStatus),
            index=list(TransactionStatus).index(draft.status),
            format_func=lambda x: x.value.title(),
            key=f"{key}_status",
        )
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return

    submitted_draft = TransactionDraft(
        date=when,
        description=description,
        category=category,
        amount=amount,
        type=transaction_type,
        status=status,
    )
    transactions = st.session_state.transactions
    if existing:
        outcome = transaction_flow.update(transactions, existing.id, submitted_draft)
    else:
        outcome = run_async(transaction_flow.save(transactions, submitted_draft))

    if outcome.errors:
        show_errors(outcome.errors)
        return

    st.session_state.transactions = outcome.records
    if outcome.result is not None:
        show_save_outcome(outcome, "transaction")
    else:
        st.success("✅ Transaction updated")


def render_bills_page(bill_flow: BillFlow):
    """Render the due bills list and form."""
    st.title("🧾 Due Bills")
    symbol = currency()
    bills = st.session_state.bills
    today = date.today()

    with st.expander("➕ Add Bill"):
        render_bill_form(bill_flow)

    col1, col2, col3 = st.columns(3)
    search = col1.text_input("Search", key="bill_search")
    status_filter = col2.selectbox(
        "Status", [ALL] + [s.value for s in BillStatus], key="bill_status",
    )
    category_filter = col3.selectbox(
        "Category", [ALL] + [c.name for c in BILL_CATEGORIES], key="bill_category",
    )
    criteria = BillFilter(search=search, status=status_filter, category=category_filter)

    sort = st.session_state.bill_sort
    cols = st.columns(len(BillSortField))
    for col, field in zip(cols, BillSortField):
        arrow = ""
        if sort.field == field.value:
            arrow = " ↑" if sort.direction.value == "asc" else " ↓"
        label = field.value.replace("_", " ").title()
        if col.button(f"Sort by {label}{arrow}"):
            st.session_state.bill_sort = toggle_sort(
                sort, field.value, BILL_SORT_DEFAULT.direction,
            )
            st.rerun()

    view = bill_flow.view(bills, criteria, st.session_state.bill_sort, today)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Outstanding", format_currency(view.stats.total_outstanding, symbol))
    col2.metric("Overdue", view.stats.overdue_count)
    col3.metric("Due Soon", view.stats.due_soon_count)
    col4.metric("Paid This Month", view.stats.paid_this_month_count)

    st.markdown("---")
    if not view.bills:
        st.info("No bills match the current filters.")

    for bill in view.bills:
        status = effective_status(bill, today)
        col1, col2, col3, col4 = st.columns([4, 2, 2, 1])
        with col1:
            st.markdown(f"**{bill.title}** · {bill.category}")
            st.caption(bill.description)
        col2.markdown(format_currency(bill.amount, symbol))
        with col3:
            st.markdown(STATUS_ICONS[status])
            if status != BillStatus.PAID:
                st.caption(due_label(bill, today))
        with col4:
            if status != BillStatus.PAID and st.button("Paid", key=f"pay_{bill.id}"):
                st.session_state.bills = bill_flow.mark_paid(bills, bill.id)
                st.rerun()
            if st.button("🗑️", key=f"del_{bill.id}"):
                st.session_state.bills = bill_flow.delete(bills, [bill.id])
                st.rerun()

    if view.bills:
        with st.expander("✏️ Edit Bill"):
            labels = {b.id: b.title for b in view.bills}
            editing = st.selectbox(
                "Bill", options=list(labels), format_func=lambda i: labels[i],
            )
            record = next(b for b in bills if b.id == editing)
            render_bill_form(bill_flow, existing=record)


def render_bill_form(bill_flow: BillFlow, existing=None):
    """Add form, or edit form when `existing` is given."""
    draft = BillDraft.from_record(existing) if existing else BillDraft.blank()
    names = [c.name for c in BILL_CATEGORIES]
    if draft.category and draft.category not in names:
        names.append(draft.category)

    key = f"bill_form_{existing.id if existing else 'new'}"

    with st.form(key):
        title = st.text_input("Title *", value=draft.title, key=f"{key}_title")
        description = st.text_area("Description *", value=draft.description, key=f"{key}_description")
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount *", value=draft.amount, key=f"{key}_amount")
            category = st.selectbox(
                "Category *",
                options=[""] + names,
                index=([""] + names).index(draft.category) if draft.category else 0,
                key=f"{key}_category",
            )
        with col2:
            due = st.date_input("Due Date *", value=draft.parsed_due_date, key=f"{key}_due_date")
            status = st.selectbox(
                "Status",
                options=list(BillStatus),
                index=list(BillStatus).index(draft.status),
                format_func=lambda x: x.value.title(),
                key=f"{key}_status",
            )
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return

    submitted_draft = BillDraft(
        title=title,
        description=description,
        amount=amount,
        due_date=due,
        category=category,
        status=status,
    )
    bills = st.session_state.bills
    if existing:
        outcome = bill_flow.update(bills, existing.id, submitted_draft)
    else:
        outcome = run_async(bill_flow.save(bills, submitted_draft))

    if outcome.errors:
        show_errors(outcome.errors)
        return

    st.session_state.bills = outcome.records
    if outcome.result is not None:
        show_save_outcome(outcome, "bill")
    else:
        st.success("✅ Bill updated")


def render_reports_page(report_flow: ReportFlow):
    """Render the financial reports page."""
    st.title("📊 Reports")
    symbol = currency()
    today = date.today()

    if st.button("🔄 Refresh report data"):
        transactions, bills = run_async(report_flow.load())
        st.session_state.transactions = transactions
        st.session_state.bills = bills
        st.rerun()

    col1, col2, col3 = st.columns(3)
    period = col1.selectbox(
        "Period",
        options=list(ReportPeriod),
        format_func=lambda p: p.label,
    )
    year = col2.number_input("Year", min_value=1900, max_value=2100, value=today.year, step=1)
    month = col3.number_input("Month", min_value=1, max_value=12, value=today.month, step=1)

    metrics = report_flow.metrics(
        st.session_state.transactions,
        st.session_state.bills,
        period,
        int(year),
        int(month),
    )

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Revenue", format_currency(metrics.total_revenue, symbol))
    col2.metric("Total Expenses", format_currency(metrics.total_expenses, symbol))
    col3.metric(
        "Net Income",
        ("-" if metrics.net_income < 0 else "") + format_currency(metrics.net_income, symbol),
    )
    col4.metric("Profit Margin", format_percentage(metrics.profit_margin))

    col1, col2, col3 = st.columns(3)
    col1.metric("Outstanding Bills", format_currency(metrics.outstanding_bills, symbol))
    col2.metric(
        "Avg. Transaction",
        format_currency(metrics.average_transaction_value, symbol),
    )
    if metrics.top_expense_category:
        col3.metric(
            "Top Expense Category",
            metrics.top_expense_category.name,
            format_currency(metrics.top_expense_category.amount, symbol),
            delta_color="off",
        )
    else:
        col3.metric("Top Expense Category", "N/A")

    st.markdown("---")
    st.subheader("Financial Health")
    gauge = health_gauge(metrics.profit_margin)
    st.progress(gauge / 100)
    st.markdown(
        f'<div class="big-number">{health_score(metrics.profit_margin)}</div>',
        unsafe_allow_html=True,
    )
    st.caption(health_rating(metrics.profit_margin))

    st.subheader("Monthly Trend")
    series = pd.DataFrame(monthly_series(st.session_state.transactions, months=12))
    if not series.empty:
        st.line_chart(series.set_index("month")[["income", "expenses", "net"]].astype(float))


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Google Sheets (Storage)", "google_sheets"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if get_settings().app.use_sample_data:
        st.info("Running on built-in sample data (USE_SAMPLE_DATA is set).")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Set `GOOGLE_SHEETS_CREDENTIALS_PATH` and `GOOGLE_SHEETS_SPREADSHEET_ID` "
        "in a `.env` file to connect your spreadsheet. Without them the "
        "dashboard runs on sample data."
    )


if __name__ == "__main__":
    main()
