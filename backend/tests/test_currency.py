from payecore.core.currency import format_currency


class TestFormatCurrency:
    def test_naira_default(self):
        assert format_currency(1234.5) == "₦1,234.50"

    def test_rounds_to_two_decimals(self):
        assert format_currency(300000) == "₦300,000.00"
        assert format_currency(0.005) in ("₦0.01", "₦0.00")

    def test_negative_amount(self):
        assert format_currency(-2500) == "-₦2,500.00"

    def test_other_supported_currency(self):
        assert format_currency(1000, "USD") == "$1,000.00"

    def test_unknown_currency_uses_code(self):
        assert format_currency(1000, "XOF") == "XOF 1,000.00"
