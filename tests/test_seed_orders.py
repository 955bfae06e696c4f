"""Tests for the order seeding script."""

from __future__ import annotations

from luckydraw.errors import ConfigurationError
from luckydraw.repositories.order_repository import InMemoryOrderRepository
from scripts import seed_orders


def test_read_order_numbers():
    lines = ["A100\n", "\n", "# comment\n", "A100\n", "B/1\n", " C300 ,note\n"]

    assert list(seed_orders.read_order_numbers(lines)) == ["A100", "C300"]


def test_read_order_numbers_skip_header():
    lines = ["orderNumber,region\n", "A100,EU\n"]

    assert list(seed_orders.read_order_numbers(lines, skip_header=True)) == ["A100"]


def test_dry_run_does_not_build_store(tmp_path, monkeypatch):
    source = tmp_path / "orders.txt"
    source.write_text("A100\nB200\n", encoding="utf-8")

    def fail(config):
        raise AssertionError("store should not be built")

    monkeypatch.setattr(seed_orders, "create_order_store", fail)

    assert seed_orders.main([str(source), "--dry-run"]) == 0


def test_main_seeds_store(tmp_path, monkeypatch):
    source = tmp_path / "orders.csv"
    source.write_text("A100\nB200\n", encoding="utf-8")
    store = InMemoryOrderRepository(["A100"])
    store.redeem("A100", "PRIZE1")
    seen = {}

    def build(config):
        seen.update(config)
        return store

    monkeypatch.setattr(seed_orders, "create_order_store", build)

    assert seed_orders.main([str(source), "--backend", "mongo"]) == 0
    assert seen["DB_BACKEND"] == "mongo"
    assert store.get_order("A100").has_played is True
    assert store.get_order("B200").has_played is False


def test_main_reports_configuration_error(tmp_path, monkeypatch):
    source = tmp_path / "orders.txt"
    source.write_text("A100\n", encoding="utf-8")

    def build(config):
        raise ConfigurationError("Firebase service account key not found in environment variables.")

    monkeypatch.setattr(seed_orders, "create_order_store", build)

    assert seed_orders.main([str(source)]) == 1


def test_main_reads_dotenv_from_working_directory(tmp_path, monkeypatch):
    source = tmp_path / "orders.txt"
    source.write_text("A100\n", encoding="utf-8")
    (tmp_path / ".env").write_text("FIREBASE_SERVICE_ACCOUNT_KEY=ZmFrZQ==\nDB_BACKEND=firestore\n", encoding="utf-8")
    # set-then-delete so monkeypatch also removes what load_dotenv adds
    for name in ("FIREBASE_SERVICE_ACCOUNT_KEY", "DB_BACKEND"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.chdir(tmp_path)
    seen = {}

    def build(config):
        seen.update(config)
        return InMemoryOrderRepository()

    monkeypatch.setattr(seed_orders, "create_order_store", build)

    assert seed_orders.main([str(source)]) == 0
    assert seen["FIREBASE_SERVICE_ACCOUNT_KEY"] == "ZmFrZQ=="
    assert seen["DB_BACKEND"] == "firestore"
