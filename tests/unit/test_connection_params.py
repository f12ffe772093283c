"""Tests for connection/credential fragments and the generic resolvers."""

from __future__ import annotations

import pytest

from spine_mysql.config import ConfigParams
from spine_mysql.connect import (
    ConnectionParams,
    ConnectionResolver,
    CredentialParams,
    CredentialResolver,
    MemoryCredentialStore,
    MemoryDiscovery,
)
from spine_mysql.errors import ConfigError
from spine_mysql.references import Descriptor, References


class TestConnectionParams:
    def test_many_from_config_single_and_multiple(self):
        config = ConfigParams.from_tuples(
            "connection.host", "h0",
            "connections.node1.host", "h1",
            "connections.node2.host", "h2",
        )
        hosts = [c.get_host() for c in ConnectionParams.many_from_config(config)]
        assert hosts == ["h0", "h1", "h2"]

    def test_port_defaults_to_zero(self):
        assert ConnectionParams({"host": "h"}).get_port() == 0
        assert ConnectionParams({"port": "3306"}).get_port() == 3306

    def test_ip_is_host_alias(self):
        assert ConnectionParams({"ip": "10.0.0.1"}).get_host() == "10.0.0.1"

    def test_is_immutable(self):
        connection = ConnectionParams({"host": "h"})
        with pytest.raises(TypeError):
            connection["host"] = "other"
        with pytest.raises(TypeError):
            connection.pop("host")

    def test_discovery_key(self):
        assert ConnectionParams({"discovery_key": "db"}).use_discovery()
        assert not ConnectionParams({"host": "h"}).use_discovery()


class TestCredentialParams:
    def test_username_password(self):
        credential = CredentialParams({"username": "u", "password": "p"})
        assert credential.get_username() == "u"
        assert credential.get_password() == "p"

    def test_repr_redacts_password(self):
        assert "secret" not in repr(CredentialParams({"username": "u", "password": "secret"}))

    def test_store_key(self):
        assert CredentialParams({"store_key": "k"}).use_credential_store()


class TestConnectionResolver:
    async def test_returns_configured_fragments(self):
        resolver = ConnectionResolver(ConfigParams.from_tuples("connection.host", "h", "connection.port", 1))
        connections = await resolver.resolve_all(None)
        assert [c.get_host() for c in connections] == ["h"]

    async def test_discovery_expands_key(self):
        discovery = MemoryDiscovery(ConfigParams.from_tuples("orders", "host=db1;port=3306;database=orders"))
        references = References.from_tuples(Descriptor("pip-services", "discovery", "memory", "default", "1.0"), discovery)
        resolver = ConnectionResolver(ConfigParams.from_tuples("connection.discovery_key", "orders"), references)

        connection = await resolver.resolve("cid")

        assert connection.get_host() == "db1"
        assert connection.get_database() == "orders"

    async def test_discovery_key_without_service_raises(self):
        resolver = ConnectionResolver(ConfigParams.from_tuples("connection.discovery_key", "orders"), References())
        with pytest.raises(ConfigError) as exc_info:
            await resolver.resolve_all("cid")
        assert exc_info.value.code == "NO_DISCOVERY"
        assert exc_info.value.correlation_id == "cid"


class TestCredentialResolver:
    async def test_no_credentials(self):
        assert await CredentialResolver().lookup(None) is None

    async def test_plain_credential(self):
        resolver = CredentialResolver(ConfigParams.from_tuples("credential.username", "u"))
        credential = await resolver.lookup(None)
        assert credential.get_username() == "u"

    async def test_store_lookup(self):
        store = MemoryCredentialStore(ConfigParams.from_tuples("orders", "username=app;password=pw"))
        references = References.from_tuples(Descriptor("pip-services", "credential-store", "memory", "default", "1.0"), store)
        resolver = CredentialResolver(ConfigParams.from_tuples("credential.store_key", "orders"), references)

        credential = await resolver.lookup(None)

        assert credential.get_username() == "app"
        assert credential.get_password() == "pw"

    async def test_store_key_without_store_raises(self):
        resolver = CredentialResolver(ConfigParams.from_tuples("credential.store_key", "orders"), References())
        with pytest.raises(ConfigError) as exc_info:
            await resolver.lookup(None)
        assert exc_info.value.code == "NO_CREDENTIAL_STORE"

    async def test_store_missing_key_returns_none(self):
        references = References.from_tuples(
            Descriptor("pip-services", "credential-store", "memory", "default", "1.0"), MemoryCredentialStore()
        )
        resolver = CredentialResolver(ConfigParams.from_tuples("credential.store_key", "orders"), references)
        assert await resolver.lookup(None) is None


class TestMemoryCollaborators:
    async def test_discovery_register_and_resolve(self):
        discovery = MemoryDiscovery()
        discovery.register("k", ConnectionParams({"host": "a"}))
        discovery.register("k", ConnectionParams({"host": "b"}))
        assert (await discovery.resolve_one(None, "k")).get_host() == "a"
        assert len(await discovery.resolve_all(None, "k")) == 2
        assert await discovery.resolve_one(None, "missing") is None

    async def test_credential_store_remove(self):
        store = MemoryCredentialStore()
        store.store("k", CredentialParams({"username": "u"}))
        store.store("k", None)
        assert await store.lookup(None, "k") is None
