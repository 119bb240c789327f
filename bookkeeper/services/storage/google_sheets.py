"""
Google Sheets Record Store

Google Sheets is the backend because:
1. The owner can view and edit the books directly in Sheets
2. No database setup required
3. Built-in backup and sharing

TRADEOFFS:
- No transactions and no conflict detection (last write wins)
- Limited query capabilities (we filter in Python)
- Reads fetch the whole sheet every time

Failures never reach the caller. Reads fall back to the fixed sample data
and writes report `persisted=False`; both are logged.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

import gspread
from google.oauth2.service_account import Credentials

from bookkeeper.config import get_settings
from bookkeeper.logging_config import get_logger
from bookkeeper.models.records import (
    AppendResult,
    Bill,
    BillDraft,
    BillStatus,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    utc_now,
)
from bookkeeper.services.storage.interface import (
    BILL_ID_PREFIX,
    TRANSACTION_ID_PREFIX,
    ConnectionError,
    NotFoundError,
    RecordStore,
    build_bill,
    build_transaction,
)
from bookkeeper.services.storage.sample_data import (
    sample_bills,
    sample_transactions,
)


logger = get_logger(__name__)


# Column layout of the Transactions sheet (A:I)
TRANSACTION_COLUMNS = [
    "id",
    "date",
    "description",
    "category",
    "amount",
    "type",
    "status",
    "createdAt",
    "updatedAt",
]

# Column layout of the DueBills sheet (A:I)
BILL_COLUMNS = [
    "id",
    "title",
    "description",
    "amount",
    "dueDate",
    "status",
    "category",
    "createdAt",
    "updatedAt",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and worksheet lookup. Errors surface as
    storage exceptions; callers decide how to degrade.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise NotFoundError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
            logger.info("worksheet_created", title=title)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name,
            TRANSACTION_COLUMNS,
        )

    def get_bills_sheet(self) -> gspread.Worksheet:
        """Get or create the DueBills worksheet."""
        return self._get_or_create_sheet(
            self._settings.bills_sheet_name,
            BILL_COLUMNS,
        )


def _parse_amount(value: str) -> Decimal:
    """Unreadable amounts count as zero."""
    try:
        amount = Decimal(value.strip().replace(",", ""))
    except (InvalidOperation, AttributeError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def _parse_timestamp(value: str, default: datetime) -> datetime:
    if not value:
        return default
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_day(value: str) -> date:
    # Accepts both "2024-01-15" and full ISO timestamps
    return date.fromisoformat(value.strip()[:10])


class GoogleSheetsRecordStore(RecordStore):
    """
    Google Sheets implementation of the record store.

    One record per row, header in row 1. Amounts and timestamps are written
    as text (RAW input) so the sheet never reformats them.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._client = client or GoogleSheetsClient()
        self._clock = clock

    # -------------------------------------------------------------------------
    # Row conversion
    # -------------------------------------------------------------------------

    def _transaction_to_row(self, transaction: Transaction) -> list:
        """Convert a Transaction to a spreadsheet row."""
        return [
            transaction.id,
            transaction.date.isoformat(),
            transaction.description,
            transaction.category,
            str(transaction.amount),
            transaction.type.value,
            transaction.status.value,
            transaction.created_at.isoformat(),
            transaction.updated_at.isoformat(),
        ]

    def _row_to_transaction(
        self,
        row: list,
        index: int,
        now: datetime,
    ) -> Transaction:
        """
        Convert a spreadsheet row to a Transaction.

        Blank cells take the same defaults the sheet has always implied.

        Raises:
            ValueError: If the row cannot form a valid transaction
        """
        def safe_get(i: int, default: str = "") -> str:
            try:
                value = str(row[i]).strip()
            except IndexError:
                return default
            return value or default

        return Transaction(
            id=safe_get(0) or f"{TRANSACTION_ID_PREFIX}_{index}",
            date=_parse_day(safe_get(1)),
            description=safe_get(2),
            category=safe_get(3),
            amount=_parse_amount(safe_get(4)),
            type=TransactionType(safe_get(5, TransactionType.EXPENSE.value).lower()),
            status=TransactionStatus(safe_get(6, TransactionStatus.COMPLETED.value).lower()),
            created_at=_parse_timestamp(safe_get(7), now),
            updated_at=_parse_timestamp(safe_get(8), now),
        )

    def _bill_to_row(self, bill: Bill) -> list:
        """Convert a Bill to a spreadsheet row."""
        return [
            bill.id,
            bill.title,
            bill.description,
            str(bill.amount),
            bill.due_date.isoformat(),
            bill.status.value,
            bill.category,
            bill.created_at.isoformat(),
            bill.updated_at.isoformat(),
        ]

    def _row_to_bill(self, row: list, index: int, now: datetime) -> Bill:
        """
        Convert a spreadsheet row to a Bill.

        Raises:
            ValueError: If the row cannot form a valid bill
        """
        def safe_get(i: int, default: str = "") -> str:
            try:
                value = str(row[i]).strip()
            except IndexError:
                return default
            return value or default

        return Bill(
            id=safe_get(0) or f"{BILL_ID_PREFIX}_{index}",
            title=safe_get(1),
            description=safe_get(2),
            amount=_parse_amount(safe_get(3)),
            due_date=_parse_day(safe_get(4)),
            status=BillStatus(safe_get(5, BillStatus.PENDING.value).lower()),
            category=safe_get(6),
            created_at=_parse_timestamp(safe_get(7), now),
            updated_at=_parse_timestamp(safe_get(8), now),
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def fetch_transactions(self) -> list[Transaction]:
        """Read every transaction row, falling back to sample data."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
        except Exception as e:
            logger.warning(
                "records_fetch_failed",
                entity="transaction",
                error=str(e),
                fallback="sample_data",
            )
            return sample_transactions()

        # Header only (or an empty sheet)
        if len(all_rows) <= 1:
            return []

        now = self._clock()
        transactions = []
        for index, row in enumerate(all_rows[1:]):
            if not row or not any(str(cell).strip() for cell in row):
                continue
            try:
                transactions.append(self._row_to_transaction(row, index, now))
            except ValueError as e:
                logger.warning(
                    "malformed_row_skipped",
                    entity="transaction",
                    row_number=index + 2,
                    error=str(e),
                )

        logger.debug("records_fetched", entity="transaction", count=len(transactions))
        return transactions

    async def fetch_bills(self) -> list[Bill]:
        """Read every bill row, falling back to sample data."""
        try:
            sheet = self._client.get_bills_sheet()
            all_rows = sheet.get_all_values()
        except Exception as e:
            logger.warning(
                "records_fetch_failed",
                entity="bill",
                error=str(e),
                fallback="sample_data",
            )
            return sample_bills()

        if len(all_rows) <= 1:
            return []

        now = self._clock()
        bills = []
        for index, row in enumerate(all_rows[1:]):
            if not row or not any(str(cell).strip() for cell in row):
                continue
            try:
                bills.append(self._row_to_bill(row, index, now))
            except ValueError as e:
                logger.warning(
                    "malformed_row_skipped",
                    entity="bill",
                    row_number=index + 2,
                    error=str(e),
                )

        logger.debug("records_fetched", entity="bill", count=len(bills))
        return bills

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def append_transaction(self, draft: TransactionDraft) -> AppendResult:
        """Build a transaction and append it as a new row."""
        transaction = build_transaction(draft, self._clock())
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(
                self._transaction_to_row(transaction),
                value_input_option="RAW",
            )
        except Exception as e:
            logger.warning(
                "record_append_failed",
                entity="transaction",
                record_id=transaction.id,
                error=str(e),
            )
            return AppendResult(
                record=transaction,
                persisted=False,
                error_message=str(e),
            )

        logger.info("record_appended", entity="transaction", record_id=transaction.id)
        return AppendResult(record=transaction, persisted=True)

    async def append_bill(self, draft: BillDraft) -> AppendResult:
        """Build a bill and append it as a new row."""
        bill = build_bill(draft, self._clock())
        try:
            sheet = self._client.get_bills_sheet()
            sheet.append_row(self._bill_to_row(bill), value_input_option="RAW")
        except Exception as e:
            logger.warning(
                "record_append_failed",
                entity="bill",
                record_id=bill.id,
                error=str(e),
            )
            return AppendResult(record=bill, persisted=False, error_message=str(e))

        logger.info("record_appended", entity="bill", record_id=bill.id)
        return AppendResult(record=bill, persisted=True)
