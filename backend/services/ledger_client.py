"""Ledger client: the on-chain credential token registry.

Minting and reads happen in the subject's wallet, outside this service. The
binder only records token ids the caller reports, so nothing in the request
path depends on a ledger implementation. The ledger gives no dedup guarantee:
two mints of the same content address produce two tokens.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel


class LedgerRecord(BaseModel):
    token_id: int
    owner: str
    content_address: str
    score: int
    tags: list[str] = []
    timestamp: datetime
    issuer: str
    active: bool = True


class LedgerClient(ABC):

    @abstractmethod
    async def mint(self, owner: str, content_address: str, score: int, tags: list[str]) -> int:
        """Mint a non-transferable credential token, return its id."""

    @abstractmethod
    async def get(self, token_id: int) -> LedgerRecord:
        """Return the token record or raise NotFound."""

    @abstractmethod
    async def revoke(self, token_id: int) -> None:
        """Mark a token inactive."""
