"""Test fixtures and sample data."""
import pytest
from datetime import datetime
from decimal import Decimal

from models import ExternalAccount, ExternalAccountEntry, Holding, PortfolioMetrics, Snapshot
from sqlalchemy.orm import Session

USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"

RAYMOND_JAMES_HEADER = (
    "Client Name,Client Id,Account Nickname,Account Number,Asset Category,Industry,"
    "Symbol,Holding,Quantity,Price,Average Cost,Book Value,Market Value,"
    "Accrued Interest,G/L,G/L (%),Percentage of Assets"
)

WEALTHSIMPLE_HEADER = (
    "Account Name,Account Type,Account Number,Symbol,Name,Security Type,Quantity,"
    "Market Price,Book Value (CAD),Market Value,Market Unrealized Returns"
)


def raymond_james_csv(*rows: str) -> bytes:
    """Build a Raymond James export from data rows."""
    return ("\n".join((RAYMOND_JAMES_HEADER,) + rows) + "\n").encode("utf-8")


def wealthsimple_csv(*rows: str) -> bytes:
    """Build a Wealthsimple export from data rows."""
    return ("\n".join((WEALTHSIMPLE_HEADER,) + rows) + "\n").encode("utf-8")


SAMPLE_RJ_ROWS = (
    'Jane Doe,****1234,RRSP,ACC-001,Equities,Technology,AAPL,Apple Inc,10,"$190.50",150.25,'
    '"1,502.50","1,905.00",0.00,402.50,26.79%,63.50%',
    'Jane Doe,****1234,TFSA,ACC-002,Fixed Income,,XBB,iShares Core Bond,40,27.40,28.00,'
    '"1,120.00","1,096.00",-,(24.00),-2.14%,36.50%',
)

SAMPLE_WS_ROWS = (
    "Main,TFSA,WS-9,VFV,Vanguard S&P 500,EXCHANGE_TRADED_FUND,12.5,120.123456,1200.004,1501.5449,301.54",
    "Main,RRSP,WS-9,XEQT,iShares Core Equity,EXCHANGE_TRADED_FUND,20,30.10,650,602.00,-48.00",
)


def create_snapshot(
    db: Session,
    source: str,
    snapshot_date: datetime,
    market_value: Decimal,
    book_value: Decimal | None = None,
    gain_loss: Decimal | None = None,
    user_id: str = USER_ID,
    imported_at: datetime | None = None,
    holdings: list[dict] | None = None,
) -> Snapshot:
    """Create a snapshot with metrics (and optional holdings) directly in the DB.

    Args:
        db: Database session
        source: PortfolioSource value
        snapshot_date: Naive UTC snapshot date
        market_value: Total market value for the metrics row
        book_value: Total book value (defaults to market_value)
        gain_loss: Total gain (defaults to market - book)
        user_id: Owner
        imported_at: Import time (defaults to now)
        holdings: Keyword dicts for Holding rows

    Returns:
        The created Snapshot
    """
    book = market_value if book_value is None else book_value
    gain = market_value - book if gain_loss is None else gain_loss
    snap = Snapshot(
        user_id=user_id,
        source=source,
        snapshot_date=snapshot_date,
        filename=f"{source}.csv",
        record_count=len(holdings or []),
    )
    if imported_at is not None:
        snap.imported_at = imported_at
    db.add(snap)
    db.flush()

    for data in holdings or []:
        db.add(Holding(snapshot_id=snap.id, **data))
    db.add(
        PortfolioMetrics(
            snapshot_id=snap.id,
            total_market_value=market_value,
            total_book_value=book,
            total_gain_loss=gain,
            total_gain_loss_percent=Decimal("0"),
            holdings_count=len(holdings or []),
            accounts_count=1,
        )
    )
    db.commit()
    db.refresh(snap)
    return snap


def create_external_account(
    db: Session,
    institution_name: str,
    account_name: str,
    account_type: str | None = None,
    entries: list[tuple[Decimal, datetime]] | None = None,
    user_id: str = USER_ID,
    is_active: bool = True,
) -> ExternalAccount:
    """Create an external account with (value, recorded_at) entries."""
    account = ExternalAccount(
        user_id=user_id,
        institution_name=institution_name,
        account_name=account_name,
        account_type=account_type,
        is_active=is_active,
    )
    db.add(account)
    db.flush()
    for value, recorded_at in entries or []:
        db.add(ExternalAccountEntry(account_id=account.id, value=value, recorded_at=recorded_at))
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def auth_headers() -> dict:
    """Headers identifying the default test user."""
    return {"X-User-Id": USER_ID}


@pytest.fixture
def snapshot(db: Session) -> Snapshot:
    """A Raymond James snapshot with two holdings."""
    return create_snapshot(
        db,
        "raymond_james",
        datetime(2024, 3, 1),
        Decimal("3001.00"),
        book_value=Decimal("2622.50"),
        holdings=[
            {
                "symbol": "AAPL",
                "name": "Apple Inc",
                "asset_category": "Equities",
                "account_label": "RRSP",
                "book_value": Decimal("1502.50"),
                "market_value": Decimal("1905.00"),
                "gain_loss": Decimal("402.50"),
            },
            {
                "symbol": "XBB",
                "name": "iShares Core Bond",
                "asset_category": "Fixed Income",
                "account_label": "TFSA",
                "book_value": Decimal("1120.00"),
                "market_value": Decimal("1096.00"),
                "gain_loss": Decimal("-24.00"),
            },
        ],
    )


@pytest.fixture
def external_account(db: Session) -> ExternalAccount:
    """A savings account with two balances."""
    return create_external_account(
        db,
        "Big Bank",
        "Savings",
        "Savings",
        entries=[
            (Decimal("1000.00"), datetime(2024, 1, 1, 12, 0)),
            (Decimal("1500.00"), datetime(2024, 2, 1, 12, 0)),
        ],
    )


@pytest.fixture
def mortgage_account(db: Session) -> ExternalAccount:
    """A mortgage stored as a positive magnitude."""
    return create_external_account(
        db,
        "Big Bank",
        "Home",
        "Mortgage",
        entries=[(Decimal("2000.00"), datetime(2024, 1, 1, 12, 0))],
    )
