"""Tests for period reports."""

from datetime import date
from decimal import Decimal

import pytest

from microbooks.domain.categories import TransactionCategory as C
from microbooks.domain.entities import Snapshot, StockBalance, TaxCategory
from microbooks.domain.periods import ReportingPeriod
from microbooks.domain.reports import DELETED_PRODUCT_NAME, ReportService


@pytest.fixture
def reports(sample_snapshot, rates):
    return ReportService(sample_snapshot, rates=rates)


class TestProfitAndLoss:
    def test_year(self, reports):
        report = reports.profit_and_loss(2024)
        assert report.total_income == Decimal("960")
        assert report.total_expense == Decimal("5505")
        assert report.profit == Decimal("-4545")

    def test_quarter(self, reports):
        report = reports.profit_and_loss(ReportingPeriod.for_quarter(2023, 4))
        assert report.total_income == Decimal("300")
        assert report.total_expense == Decimal("0")


class TestSalesByProduct:
    """Tests for the sales-by-product report."""

    def test_year(self, reports):
        sales = reports.sales_by_product(2024)

        assert [(s.product_id, s.name) for s in sales] == [(1, "Rice 5kg"), (2, "Cooking oil")]
        assert sales[0].quantity == Decimal("4")
        assert sales[0].unit_price == Decimal("150")
        assert sales[0].total == Decimal("600")
        assert sales[1].total == Decimal("60")

    def test_aggregates_lines_and_keeps_first_price(self, make_product, make_txn, rates):
        transactions = (
            make_txn(1, date(2024, 1, 1), C.SALE, items=[(1, 2, 10)]),
            make_txn(2, date(2024, 1, 2), C.SALE, items=[(1, 1, 13), (9, 5, 1)]),
        )
        snapshot = Snapshot(transactions=transactions, products=(make_product(1, "Soap"),))
        sales = ReportService(snapshot, rates).sales_by_product(2024)

        assert sales[0].quantity == Decimal("3")
        assert sales[0].unit_price == Decimal("10")
        assert sales[0].total == Decimal("33")
        assert sales[1].name == DELETED_PRODUCT_NAME
        assert sales[1].product_id == 9


class TestTaxDeclaration:
    """Tests for the tax declaration."""

    def test_year(self, reports):
        declaration = reports.tax_declaration(2024)

        assert [line.tax_category for line in declaration.lines] == [
            TaxCategory.DISTRIBUTION_GOODS
        ]
        line = declaration.lines[0]
        assert line.revenue == Decimal("660")
        assert line.vat_amount == Decimal("6.6")
        assert line.pit_amount == Decimal("3.3")
        assert declaration.total_revenue == Decimal("660")

        expenses = {line.category: line.amount for line in declaration.expense_lines}
        assert expenses[C.LABOR_COST] == Decimal("1000")
        assert expenses[C.ELECTRICITY] == Decimal("500")
        assert expenses[C.RENT] == Decimal("0")
        assert declaration.total_expense == Decimal("1500")
        assert len(declaration.sales_by_product) == 2

    def test_lines_per_tax_category(self, make_product, make_txn, rates):
        products = (
            make_product(1, tax_category=TaxCategory.SERVICES_NO_MATERIALS),
            make_product(2, tax_category=TaxCategory.RENTAL_PROPERTY),
        )
        transactions = (
            make_txn(1, date(2024, 1, 1), C.SERVICE, items=[(1, 1, 1000)]),
            make_txn(2, date(2024, 1, 2), C.RENTAL_INCOME, items=[(2, 1, 2000)]),
        )
        declaration = ReportService(
            Snapshot(transactions=transactions, products=products), rates
        ).tax_declaration(2024)

        by_category = {line.tax_category: line for line in declaration.lines}
        assert set(by_category) == {
            TaxCategory.SERVICES_NO_MATERIALS,
            TaxCategory.RENTAL_PROPERTY,
        }
        assert by_category[TaxCategory.SERVICES_NO_MATERIALS].vat_amount == Decimal("50")
        assert by_category[TaxCategory.RENTAL_PROPERTY].pit_amount == Decimal("100")
        assert declaration.total_vat + declaration.total_pit == Decimal("270")


class TestInventorySummary:
    def test_year(self, reports):
        rows = {row.product_id: row for row in reports.inventory_summary(2024)}

        rice = rows[1]
        assert rice.opening == StockBalance(Decimal("8"), Decimal("800"))
        assert rice.receipt == StockBalance(Decimal("10"), Decimal("2000"))
        assert rice.issue == StockBalance(Decimal("4"), Decimal("400"))
        assert rice.closing == StockBalance(Decimal("14"), Decimal("1400"))

        oil = rows[2]
        assert oil.closing.quantity == Decimal("-1")

    def test_idle_products_are_skipped(self, make_product, rates):
        snapshot = Snapshot(products=(make_product(1), make_product(2, opening_stock="3")))
        rows = ReportService(snapshot, rates).inventory_summary(2024)
        assert [row.product_id for row in rows] == [2]


class TestDashboard:
    def test_year(self, reports):
        summary = reports.dashboard(2024)
        assert summary.total_income == Decimal("960")
        assert summary.profit == Decimal("-4545")
        assert summary.receivable == Decimal("660")
        assert summary.payable == Decimal("1000")
