"""Wealthsimple holdings export reader."""

from decimal import Decimal
from typing import Mapping

from integrations.csv_protocol import (
    HoldingRecord,
    NumericColumn,
    PortfolioSource,
    check_identifier_columns,
    parse_numeric_columns,
    text_cell,
)
from integrations.parsing_utils import (
    MONEY_PLACES,
    PRICE_PLACES,
    QUANTITY_PLACES,
    round_half_away,
)

IDENTIFIER_COLUMNS = ("Account Number",)

NUMERIC_COLUMNS: dict[str, NumericColumn] = {
    "quantity": NumericColumn("Quantity", QUANTITY_PLACES),
    "price": NumericColumn("Market Price", PRICE_PLACES),
    "book_value": NumericColumn("Book Value (CAD)", MONEY_PLACES),
    "market_value": NumericColumn("Market Value", MONEY_PLACES),
    "gain_loss": NumericColumn("Market Unrealized Returns", MONEY_PLACES),
}

# Gain/loss percent is derived, and the export reports it to 2 dp elsewhere.
_DERIVED_PERCENT_PLACES = 2


class WealthsimpleFormat:
    """Reads the Wealthsimple "Holdings report" CSV export.

    The export carries long unrounded decimals and no gain/loss percent,
    average cost or portfolio weight, so those are derived here from the
    already-rounded book and market values.
    """

    @property
    def source(self) -> PortfolioSource:
        return PortfolioSource.wealthsimple

    @property
    def required_columns(self) -> tuple[str, ...]:
        return ("Account Name", "Symbol", "Name", "Market Value")

    @property
    def provides_portfolio_weights(self) -> bool:
        return False

    def transform_row(self, row: Mapping[str, str], row_number: int) -> HoldingRecord:
        check_identifier_columns(row, IDENTIFIER_COLUMNS, row_number, self.source.value)
        numbers = parse_numeric_columns(row, NUMERIC_COLUMNS, row_number, self.source.value)

        book_value = numbers["book_value"]
        market_value = numbers["market_value"]
        quantity = numbers["quantity"]

        gain_loss_percent = None
        if book_value and market_value is not None:
            gain_loss_percent = round_half_away(
                (market_value - book_value) / abs(book_value) * Decimal("100"),
                _DERIVED_PERCENT_PLACES,
            )

        average_cost = None
        if book_value and quantity:
            average_cost = round_half_away(book_value / quantity, PRICE_PLACES)

        return HoldingRecord(
            symbol=text_cell(row, "Symbol"),
            name=text_cell(row, "Name"),
            asset_category=text_cell(row, "Security Type"),
            account_label=_account_label(row),
            average_cost=average_cost,
            gain_loss_percent=gain_loss_percent,
            **numbers,
        )


def _account_label(row: Mapping[str, str]) -> str | None:
    """Build "<Account Name> - <Account Type>", e.g. "Main - TFSA"."""
    account_name = text_cell(row, "Account Name") or ""
    account_type = text_cell(row, "Account Type")
    label = f"{account_name} - {account_type}" if account_type else account_name
    return label or None
