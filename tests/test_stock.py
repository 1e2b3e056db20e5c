"""Tests for stock replay."""

from datetime import date
from decimal import Decimal

from microbooks.domain.categories import TransactionCategory as C
from microbooks.domain.entities import Snapshot
from microbooks.domain.stock import StockService, movement_sign


class TestMovementSign:
    def test_signs(self):
        assert movement_sign(C.PURCHASE) == 1
        assert movement_sign(C.CUSTOMER_RETURN) == 1
        assert movement_sign(C.SALE) == -1
        assert movement_sign(C.SUPPLIER_RETURN) == -1
        assert movement_sign(C.ELECTRICITY) == 0
        assert movement_sign(C.MATERIALS) == 0


class TestCurrentStock:
    """Tests for StockService.current_stock."""

    def test_opening_plus_receipts_minus_issues(self, sample_snapshot):
        service = StockService(sample_snapshot)
        # 10 opening - 2 sold + 10 bought - 4 sold
        assert service.current_stock(1) == Decimal("14")
        assert service.current_stock(2) == Decimal("-1")

    def test_as_of_is_exclusive(self, sample_snapshot):
        service = StockService(sample_snapshot)
        # Purchase on 2024-01-05 is not counted as of that day
        assert service.current_stock(1, as_of=date(2024, 1, 5)) == Decimal("8")
        assert service.current_stock(1, as_of=date(2024, 1, 6)) == Decimal("18")

    def test_unknown_product_has_zero_stock(self, sample_snapshot):
        assert StockService(sample_snapshot).current_stock(99) == Decimal("0")

    def test_holds_for_every_prefix_of_the_history(self, make_product, make_txn):
        """Test stock equals opening + receipts - issues after each transaction."""
        product = make_product(1, opening_stock="5")
        history = [
            make_txn(1, date(2024, 1, 1), C.PURCHASE, items=[(1, 10, 100)]),
            make_txn(2, date(2024, 1, 2), C.SALE, items=[(1, 3, 150)]),
            make_txn(3, date(2024, 1, 3), C.CUSTOMER_RETURN, items=[(1, 1, 150)]),
            make_txn(4, date(2024, 1, 4), C.SUPPLIER_RETURN, items=[(1, 2, 100)]),
            make_txn(5, date(2024, 1, 5), C.SALE, items=[(1, 4, 150)]),
        ]
        expected = [Decimal("15"), Decimal("12"), Decimal("13"), Decimal("11"), Decimal("7")]

        for n, quantity in enumerate(expected, start=1):
            snapshot = Snapshot(transactions=tuple(history[:n]), products=(product,))
            assert StockService(snapshot).current_stock(1) == quantity

    def test_deleting_a_transaction_is_reflected(self, make_product, make_txn):
        product = make_product(1, opening_stock="5")
        sale = make_txn(1, date(2024, 1, 2), C.SALE, items=[(1, 3, 150)])
        purchase = make_txn(2, date(2024, 1, 1), C.PURCHASE, items=[(1, 10, 100)])

        with_sale = Snapshot(transactions=(sale, purchase), products=(product,))
        without_sale = Snapshot(transactions=(purchase,), products=(product,))

        assert StockService(with_sale).current_stock(1) == Decimal("12")
        assert StockService(without_sale).current_stock(1) == Decimal("15")

    def test_only_matching_lines_count(self, make_product, make_txn):
        product = make_product(1)
        txn = make_txn(1, date(2024, 1, 1), C.PURCHASE, items=[(1, 2, 10), (2, 50, 10), (1, 3, 10)])
        snapshot = Snapshot(transactions=(txn,), products=(product,))
        assert StockService(snapshot).current_stock(1) == Decimal("5")


class TestMovements:
    def test_movements_are_signed_and_dated(self, sample_snapshot):
        moves = StockService(sample_snapshot).movements(1)
        assert [(m.transaction_id, m.quantity) for m in moves] == [
            (1, Decimal("-2")),
            (2, Decimal("10")),
            (3, Decimal("-4")),
        ]
        assert moves[1].unit_price == Decimal("200")

    def test_stock_levels_cover_catalog(self, sample_snapshot):
        levels = StockService(sample_snapshot).stock_levels()
        assert levels == {1: Decimal("14"), 2: Decimal("-1")}
