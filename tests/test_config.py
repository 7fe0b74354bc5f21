import pytest

from shop_services.core.config import Settings


class TestSettings:

    def test_per_service_defaults(self):
        s = Settings()
        assert s.port("users") == s.users_port
        assert s.database_url("orders") == s.orders_database_url
        assert s.service_url("payments") == s.payments_service_url

    def test_unknown_service(self):
        with pytest.raises(ValueError):
            Settings().port("inventory")

    def test_outgoing_token_falls_back_to_first_accepted(self):
        s = Settings(service_tokens=" first , second", service_token="")
        assert s.accepted_service_tokens() == ["first", "second"]
        assert s.outgoing_service_token() == "first"

    def test_explicit_outgoing_token(self):
        s = Settings(service_tokens="first", service_token="mine")
        assert s.outgoing_service_token() == "mine"

    def test_no_tokens(self):
        s = Settings(service_tokens="", service_token="")
        assert s.accepted_service_tokens() == []
        assert s.outgoing_service_token() == ""
