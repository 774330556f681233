from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from . import settings

Period = Literal["month", "quarter", "year"]


class CatalogModel(BaseModel):
    """
    Base for every record exchanged with the catalog, the ledger and the renderers.
    External collaborators speak camelCase ("purchasePrice", "ordersCount"); we accept
    both spellings on the way in and dump camelCase with `by_alias=True` on the way out.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ViewModel(CatalogModel):
    """Derived value objects are rebuilt on every call and never mutated."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# --- Inputs (read-only, owned by the catalog and the ledger) ---


class Product(CatalogModel):
    id: str
    name: str
    category: str = ""
    stock: float = 0
    purchase_price: float = 0
    unit: str = Field(default_factory=lambda: settings.DEFAULT_UNIT)

    @field_validator("unit", mode="before")
    @classmethod
    def default_blank_unit(cls, value):
        # Catalog exports leave the unit empty for "generic" goods.
        if value is None or (isinstance(value, str) and not value.strip()):
            return settings.DEFAULT_UNIT
        return value

    @field_validator("category", mode="before")
    @classmethod
    def default_blank_category(cls, value):
        return "" if value is None else value

    @field_validator("stock", "purchase_price", mode="before")
    @classmethod
    def default_blank_number(cls, value):
        # Empty spreadsheet cells arrive as None.
        return 0 if value is None else value


class LineItem(CatalogModel):
    description: str
    quantity: float = 0
    total: float = 0


class Invoice(CatalogModel):
    id: str
    date: date
    items: list[LineItem] = Field(default_factory=list)


class AnalysisFilters(CatalogModel):
    """Filter state handed over by the UI. Period and search term are accepted but unused."""

    selected_product: str = settings.ALL_PRODUCTS
    selected_year: int = Field(default_factory=lambda: date.today().year)
    selected_period: Period = "month"
    search_term: str = ""


# --- Derived views ---


class Totals(ViewModel):
    quantity: float = 0
    value: float = 0


class StockEvolutionPoint(ViewModel):
    month: str
    initial_stock: float
    sold: float
    remaining: float


class DistributionSlice(ViewModel):
    label: str
    value: float
    color: str
    percentage: float


class MarginRecord(ViewModel):
    product_name: str
    margin: float
    sales_value: float
    purchase_value: float
    unit: str


class MonthlySalesPoint(ViewModel):
    month: str
    quantity: float = 0
    value: float = 0
    orders_count: int = 0


class HeatmapCell(ViewModel):
    month: str
    product_name: str
    quantity: float
    value: float
    intensity: float


class SummaryStats(ViewModel):
    total_stock_initial: float = 0
    total_purchase_value: float = 0
    total_sales_value: float = 0
    total_quantity_sold: float = 0
    total_remaining_stock: float = 0
    dormant_products: int = 0
    gross_margin: float = 0


class AnalysisResult(ViewModel):
    """Everything the dashboard and the report need for one filter state."""

    filters: AnalysisFilters
    summary: SummaryStats
    stock_evolution: list[StockEvolutionPoint]
    sales_distribution: list[DistributionSlice]
    stock_distribution: list[DistributionSlice]
    stock_distribution_total: float
    margins: list[MarginRecord]
    monthly_sales: list[MonthlySalesPoint]
    heatmap: list[HeatmapCell]
    available_years: list[int]
    performance: Optional[str] = None
