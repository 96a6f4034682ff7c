"""Tests for the client facade, the default client and configuration."""

from __future__ import annotations

import pytest

import mockbase
from mockbase import Backend, MockbaseConfig, MockClient, create_client, get_client, set_client
from mockbase.config import DEFAULT_BASE_URL
from mockbase.testing import mock_user_login


class TestMockClient:
    def test_components(self, client):
        assert isinstance(client.backend, Backend)
        assert client.store is client.backend.store
        assert client.config.base_url == DEFAULT_BASE_URL

    def test_store_and_storage_share_a_clock(self, client):
        assert client.store.clock is client.storage.clock

    def test_clients_are_isolated(self):
        a = create_client()
        b = create_client()
        a.from_("trips").insert({"id": "t1"}).execute()
        assert b.from_("trips").select().execute().data == []

    def test_rpc_is_recorded(self, client):
        response = client.rpc("increment_karma", {"user_id": "u1"})
        assert response.data is None
        assert response.error is None
        assert client.rpc_calls == [{"fn": "increment_karma", "params": {"user_id": "u1"}}]

    def test_reset_clears_everything(self, client):
        client.from_("trips").insert({"id": "t1"}).execute()
        mock_user_login(client=client)
        client.storage.from_("b").upload("p", b"1")
        client.channel("c").subscribe()
        client.rpc("fn")
        client.auth.sign_in_with_otp({"email": "a@b.c"})

        client.reset()

        assert client.from_("trips").select().execute().data == []
        assert client.auth.get_session().data["session"] is None
        assert client.storage.from_("b").download("p").error is not None
        assert client.get_channels() == []
        assert client.rpc_calls == []
        assert client.auth.otp_requests == []

    def test_seed(self, client):
        client.seed("matches", [{"id": "m1", "status": "pending"}])
        response = client.from_("matches").select().execute()
        assert response.data == [{"id": "m1", "status": "pending"}]


class TestDefaultClient:
    @pytest.fixture(autouse=True)
    def _restore(self):
        from mockbase import client as client_module

        previous = client_module._default_client
        set_client(None)
        yield
        set_client(previous)

    def test_get_client_is_cached(self):
        assert get_client() is get_client()

    def test_set_client(self):
        custom = MockClient()
        set_client(custom)
        assert get_client() is custom

    def test_module_reset(self):
        get_client().from_("trips").insert({}).execute()
        mockbase.reset()
        assert get_client().store.get("trips") == []

    def test_get_client_reads_env(self, monkeypatch):
        monkeypatch.setenv("MOCKBASE_URL", "http://env.example/")
        assert get_client().config.base_url == "http://env.example"


class TestConfig:
    def test_defaults(self):
        config = MockbaseConfig()
        assert config.base_url == "https://test.supabase.co"
        assert config.session_ttl_s == 3600
        assert config.oauth_providers == ("google", "apple")
        assert not config.strict_operations
        assert not config.validate_writes

    def test_from_env_fallbacks(self, monkeypatch):
        monkeypatch.delenv("MOCKBASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://proj.supabase.co")
        assert MockbaseConfig.from_env().base_url == "https://proj.supabase.co"
        monkeypatch.setenv("SUPABASE_URL", "https://other.supabase.co")
        assert MockbaseConfig.from_env().base_url == "https://other.supabase.co"

    def test_from_env_flags(self, monkeypatch):
        monkeypatch.setenv("MOCKBASE_STRICT", "yes")
        monkeypatch.setenv("MOCKBASE_VALIDATE_WRITES", "0")
        config = MockbaseConfig.from_env()
        assert config.strict_operations
        assert not config.validate_writes
