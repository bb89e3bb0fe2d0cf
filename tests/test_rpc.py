"""
Tests for the gRPC server and client running in-process on an ephemeral port.
"""
from __future__ import annotations

import grpc
import pytest

from mailinglist.core.errors import StorageError
from mailinglist.domain.subscribers import SubscriberEntry
from mailinglist.rpc import SERVICE_NAME, codec
from mailinglist.rpc.client import MailingListClient
from mailinglist.rpc.server import create_server


@pytest.fixture()
def rpc_target(service):
    server, port = create_server(service, "127.0.0.1:0", max_workers=4)
    server.start()
    yield f"127.0.0.1:{port}"
    server.stop(None)


@pytest.fixture()
def client(rpc_target):
    with MailingListClient(rpc_target, timeout=5.0) as rpc_client:
        yield rpc_client


def test_create_get_update_delete_flow(client):
    created = client.create_email("9999@999.com")
    assert created.email == "9999@999.com"
    assert created.confirmed_at is None

    updated = client.update_email(SubscriberEntry(email="9999@999.com", confirmed_at=10000, opt_out=False))
    assert updated.id == created.id
    assert updated.confirmed_at == 10000

    deleted = client.delete_email("9999@999.com")
    assert deleted.opt_out is True
    assert client.get_email("9999@999.com").opt_out is True


def test_get_missing_returns_none(client):
    assert client.get_email("ghost@example.com") is None


def test_duplicate_create_is_already_exists(client):
    client.create_email("dup@example.com")

    with pytest.raises(grpc.RpcError) as excinfo:
        client.create_email("dup@example.com")

    assert excinfo.value.code() == grpc.StatusCode.ALREADY_EXISTS


def test_batch_excludes_opted_out(client):
    for n in range(5):
        client.create_email(f"user{n}@example.com")
    client.delete_email("user2@example.com")

    entries = client.get_email_batch(1, 10)

    assert [e.email for e in entries] == [
        "user0@example.com",
        "user1@example.com",
        "user3@example.com",
        "user4@example.com",
    ]


@pytest.mark.parametrize("page,count", [(0, 10), (1, 0)])
def test_batch_invalid_paging_is_invalid_argument(client, page, count):
    with pytest.raises(grpc.RpcError) as excinfo:
        client.get_email_batch(page, count)

    assert excinfo.value.code() == grpc.StatusCode.INVALID_ARGUMENT


def test_malformed_update_is_invalid_argument(rpc_target):
    with grpc.insecure_channel(rpc_target) as channel:
        call = channel.unary_unary(
            f"/{SERVICE_NAME}/UpdateEmail",
            request_serializer=codec.encode,
            response_deserializer=codec.decode,
        )
        with pytest.raises(grpc.RpcError) as excinfo:
            call({"emailEntry": {"email": "x@example.com", "confirmedAt": "soon"}}, timeout=5.0)

    assert excinfo.value.code() == grpc.StatusCode.INVALID_ARGUMENT


def test_storage_failure_is_internal(client, service, monkeypatch):
    def broken(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr(service.repository, "create", broken)

    with pytest.raises(grpc.RpcError) as excinfo:
        client.create_email("a@example.com")

    assert excinfo.value.code() == grpc.StatusCode.INTERNAL


def _raw_call(target: str, method: str, request: dict):
    with grpc.insecure_channel(target) as channel:
        call = channel.unary_unary(
            f"/{SERVICE_NAME}/{method}",
            request_serializer=codec.encode,
            response_deserializer=codec.decode,
        )
        return call(request, timeout=5.0)


@pytest.mark.parametrize(
    "method,request_body",
    [
        ("CreateEmail", {"emailAddr": 5}),
        ("GetEmail", {"emailAddr": ["a@example.com"]}),
        ("DeleteEmail", {}),
        ("UpdateEmail", {"emailEntry": "x@example.com"}),
        ("UpdateEmail", {"emailEntry": {"email": "s@example.com", "optOut": "false"}}),
        ("UpdateEmail", {"emailEntry": {"email": "s@example.com", "confirmedAt": 1.9}}),
        ("UpdateEmail", {"emailEntry": {"email": "s@example.com", "confirmedAt": True}}),
        ("GetEmailBatch", {"page": 1.7, "count": 10}),
        ("GetEmailBatch", {"page": True, "count": 10}),
        ("GetEmailBatch", {"page": 1, "count": "2"}),
    ],
)
def test_wrongly_typed_fields_are_invalid_argument(rpc_target, service, method, request_body):
    with pytest.raises(grpc.RpcError) as excinfo:
        _raw_call(rpc_target, method, request_body)

    assert excinfo.value.code() == grpc.StatusCode.INVALID_ARGUMENT
    assert service.repository.get("s@example.com") is None


def test_delete_missing_returns_null_entry(client):
    assert client.delete_email("ghost@example.com") is None
