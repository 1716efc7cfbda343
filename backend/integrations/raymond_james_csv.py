"""Raymond James holdings export reader."""

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
    PERCENT_PLACES,
    PRICE_PLACES,
    QUANTITY_PLACES,
)

# Read only to validate shape; never copied into a HoldingRecord.
IDENTIFIER_COLUMNS = ("Client Id", "Account Number")

NUMERIC_COLUMNS: dict[str, NumericColumn] = {
    "quantity": NumericColumn("Quantity", QUANTITY_PLACES),
    "price": NumericColumn("Price", PRICE_PLACES),
    "average_cost": NumericColumn("Average Cost", PRICE_PLACES),
    "book_value": NumericColumn("Book Value", MONEY_PLACES),
    "market_value": NumericColumn("Market Value", MONEY_PLACES),
    "accrued_interest": NumericColumn("Accrued Interest", MONEY_PLACES),
    "gain_loss": NumericColumn("G/L", MONEY_PLACES),
    "gain_loss_percent": NumericColumn("G/L (%)", PERCENT_PLACES, percent=True),
    "percent_of_portfolio": NumericColumn("Percentage of Assets", PERCENT_PLACES, percent=True),
}


class RaymondJamesFormat:
    """Reads the Raymond James "Holdings" CSV export.

    The export has one row per position per account and reports its own
    gain/loss percent and weight-of-portfolio columns. ``Client Name`` is
    required to recognise the header but is not kept.
    """

    @property
    def source(self) -> PortfolioSource:
        return PortfolioSource.raymond_james

    @property
    def required_columns(self) -> tuple[str, ...]:
        return ("Client Name", "Account Nickname", "Symbol", "Holding", "Market Value")

    @property
    def provides_portfolio_weights(self) -> bool:
        return True

    def transform_row(self, row: Mapping[str, str], row_number: int) -> HoldingRecord:
        check_identifier_columns(row, IDENTIFIER_COLUMNS, row_number, self.source.value)
        numbers = parse_numeric_columns(row, NUMERIC_COLUMNS, row_number, self.source.value)
        return HoldingRecord(
            symbol=text_cell(row, "Symbol"),
            name=text_cell(row, "Holding"),
            asset_category=text_cell(row, "Asset Category"),
            industry=text_cell(row, "Industry"),
            account_label=text_cell(row, "Account Nickname"),
            **numbers,
        )
