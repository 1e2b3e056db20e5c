"""Tests for loading tax and payroll rate tables."""

from decimal import Decimal

import pytest

from microbooks.domain.entities import PayrollColumn, TaxCategory
from microbooks.domain.errors import ValidationError
from microbooks.domain.rates import RATES_ENV_VAR, load_rate_table, parse_rate_table


class TestPackagedRates:
    """Tests for the default rate table shipped with the package."""

    def test_distribution_goods_rates(self, rates):
        rate = rates.tax_rate(TaxCategory.DISTRIBUTION_GOODS)
        assert rate.vat == Decimal("0.01")
        assert rate.pit == Decimal("0.005")
        assert rate.combined == Decimal("0.015")

    def test_every_tax_category_has_a_rate(self, rates):
        for category in TaxCategory:
            assert category in rates.tax

    def test_payroll_contributions(self, rates):
        assert rates.payroll.rate(PayrollColumn.SOCIAL_INSURANCE) == Decimal("0.255")
        assert rates.payroll.rate(PayrollColumn.UNION_FEE) == Decimal("0.02")

    def test_payroll_accrual(self, rates):
        accrued = rates.payroll.accrual(Decimal("1000"))
        assert accrued[PayrollColumn.SALARY] == Decimal("1000")
        assert accrued[PayrollColumn.SOCIAL_INSURANCE] == Decimal("255")
        assert accrued[PayrollColumn.HEALTH_INSURANCE] == Decimal("45")
        assert accrued[PayrollColumn.UNEMPLOYMENT_INSURANCE] == Decimal("20")
        assert accrued[PayrollColumn.UNION_FEE] == Decimal("20")

    def test_rates_are_decimals(self, rates):
        assert isinstance(rates.tax_rate(TaxCategory.OTHER).vat, Decimal)


class TestCustomRates:
    """Tests for loading rate tables from files and data."""

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "rates.toml"
        path.write_text('[tax.DISTRIBUTION_GOODS]\nvat = 0.02\npit = 0.01\n', encoding="utf-8")

        table = load_rate_table(path)

        assert table.tax_rate(TaxCategory.DISTRIBUTION_GOODS).combined == Decimal("0.03")
        # Missing categories owe nothing
        assert table.tax_rate(TaxCategory.OTHER).combined == Decimal("0")

    def test_load_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "rates.toml"
        path.write_text("[payroll]\nsocial_insurance = 0.3\n", encoding="utf-8")
        monkeypatch.setenv(RATES_ENV_VAR, str(path))

        table = load_rate_table()

        assert table.payroll.rate(PayrollColumn.SOCIAL_INSURANCE) == Decimal("0.3")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "rates.toml"
        path.write_text("[tax\n", encoding="utf-8")
        with pytest.raises(ValidationError, match="Could not parse rate table"):
            load_rate_table(path)

    def test_unknown_tax_category(self):
        with pytest.raises(ValidationError, match="Unknown tax category"):
            parse_rate_table({"tax": {"GAMBLING": {"vat": Decimal("0.1")}}})

    def test_unknown_payroll_column(self):
        with pytest.raises(ValidationError, match="Unknown payroll column"):
            parse_rate_table({"payroll": {"pension": Decimal("0.1")}})

    def test_salary_takes_no_rate(self):
        with pytest.raises(ValidationError):
            parse_rate_table({"payroll": {"salary": Decimal("1")}})

    @pytest.mark.parametrize("value", [Decimal("-0.01"), Decimal("1.5"), "ten", True])
    def test_rate_out_of_range_or_not_a_number(self, value):
        with pytest.raises(ValidationError):
            parse_rate_table({"tax": {"OTHER": {"vat": value}}})

    def test_integer_rates_accepted(self):
        table = parse_rate_table({"tax": {"OTHER": {"vat": 0, "pit": 1}}})
        assert table.tax_rate(TaxCategory.OTHER).pit == Decimal("1")
