"""Tests for the local ledger double."""

import pytest

from services.errors import NotFound
from factories import InMemoryLedger


@pytest.mark.asyncio
async def test_mint_assigns_sequential_ids(ledger):
    first = await ledger.mint("0xAAA", "sha256-1", 80, ["Go"])
    second = await ledger.mint("0xAAA", "sha256-1", 80, ["Go"])

    # same content twice is two tokens
    assert (first, second) == (1, 2)


@pytest.mark.asyncio
async def test_get_returns_record(ledger):
    token_id = await ledger.mint("0xAbC", "sha256-abc", 91, ["Go", "SQL"])
    record = await ledger.get(token_id)

    assert record.owner == "0xabc"
    assert record.content_address == "sha256-abc"
    assert record.score == 91
    assert record.tags == ["Go", "SQL"]
    assert record.active is True
    assert record.issuer == ledger.issuer


@pytest.mark.asyncio
async def test_get_unknown(ledger):
    with pytest.raises(NotFound):
        await ledger.get(42)


@pytest.mark.asyncio
async def test_revoke():
    ledger = InMemoryLedger(issuer="0xISSUER")
    token_id = await ledger.mint("0xabc", "sha256-abc", 70, [])
    await ledger.revoke(token_id)

    record = await ledger.get(token_id)
    assert record.active is False
    assert record.issuer == "0xissuer"


@pytest.mark.asyncio
async def test_revoke_unknown(ledger):
    with pytest.raises(NotFound):
        await ledger.revoke(7)
