from pathlib import Path

from shared.config import CART_STORAGE_KEY, DEFAULT_SHIPPING_FEE, StoreSettings


class TestStoreSettings:
    def test_defaults_run_without_backend(self, monkeypatch):
        for name in ("STORE_BACKEND_URL", "STORE_SHIPPING_FEE_FALLBACK", "STORE_PAGE_SIZE", "STORE_CART_KEY"):
            monkeypatch.delenv(name, raising=False)
        settings = StoreSettings.from_env()
        assert settings.backend_url is None
        assert settings.shipping_fee_fallback == DEFAULT_SHIPPING_FEE == 150.0
        assert settings.page_size == 16
        assert settings.cart_storage_key == CART_STORAGE_KEY == "cart-storage"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND_URL", "https://store.example")
        monkeypatch.setenv("STORE_BACKEND_KEY", "anon-key")
        monkeypatch.setenv("STORE_REQUEST_TIMEOUT", "3.5")
        monkeypatch.setenv("STORE_CART_FILE", "/tmp/outlet/cart.json")
        monkeypatch.setenv("STORE_HANDOFF_DELAY", "0")
        monkeypatch.setenv("STORE_MOMO_NUMBER", "0200000000")
        settings = StoreSettings.from_env()
        assert settings.backend_url == "https://store.example"
        assert settings.backend_key == "anon-key"
        assert settings.request_timeout == 3.5
        assert settings.cart_file == Path("/tmp/outlet/cart.json")
        assert settings.handoff_delay == 0.0
        assert settings.payment.momo_number == "0200000000"

    def test_blank_backend_url_means_none(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND_URL", "")
        assert StoreSettings.from_env().backend_url is None
