from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.domain.models.account import Account
from src.domain.models.identification_request import OPEN_STATUSES
from src.domain.models.transfer_request import TransferStatus


class VersionedStore:
    """Keeps the last committed version per id so stale saves can be simulated."""

    def __init__(self) -> None:
        self.items: dict = {}
        self.versions: dict = {}
        self.fail_next_save = False

    async def add(self, item):
        self.items[item.id] = item
        self.versions[item.id] = item.version
        return item

    async def get(self, item_id):
        return self.items.get(item_id)

    async def save(self, item, expected_version):
        if self.fail_next_save or self.versions.get(item.id) != expected_version:
            self.fail_next_save = False
            return None
        self.items[item.id] = item
        self.versions[item.id] = item.version
        return item


class CattleStore(VersionedStore):
    async def get_by_code(self, code):
        return next((c for c in self.items.values() if c.cattle_id == code), None)

    async def delete(self, cattle_id):
        return self.items.pop(cattle_id, None) is not None

    async def list_overdue(self, now, *, region=None, limit=None, unnotified_only=False):
        overdue = [
            c
            for c in self.items.values()
            if c.is_overdue(now) and (region is None or c.region == region)
            and not (unnotified_only and c.overdue_notified_at is not None)
        ]
        return overdue[:limit] if limit is not None else overdue

    async def count_overdue(self, now, *, region=None):
        return len(await self.list_overdue(now, region=region))

    async def mark_overdue_notified(self, cattle_ids, now):
        marked = []
        for cattle_id in cattle_ids:
            cattle = self.items.get(cattle_id)
            if cattle is not None and cattle.overdue_notified_at is None:
                cattle.overdue_notified_at = now
                marked.append(cattle_id)
        return marked


class TransferStore(VersionedStore):
    async def get_pending_for_cattle(self, cattle_ref):
        return next(
            (
                t
                for t in self.items.values()
                if t.cattle_ref == cattle_ref and t.status is TransferStatus.PENDING
            ),
            None,
        )

    async def list_stale(self, now):
        return [
            t
            for t in self.items.values()
            if t.status is TransferStatus.PENDING and t.expires_at < now
        ]


class IdentificationStore(VersionedStore):
    async def list_stale(self, now):
        return [r for r in self.items.values() if r.status in OPEN_STATUSES and r.expires_at < now]

    async def exists_found_for_cattle(self, cattle_ref):
        return any(
            r.result.found and r.result.cattle_ref == cattle_ref for r in self.items.values()
        )


class AccountStore:
    def __init__(self) -> None:
        self.items: dict = {}

    def put(self, account: Account) -> Account:
        self.items[account.id] = account
        return account

    async def get(self, account_id):
        return self.items.get(account_id)


class HoldingStore:
    def __init__(self) -> None:
        self.pairs: set = set()

    async def add(self, account_id, cattle_ref):
        self.pairs.add((account_id, cattle_ref))

    async def move(self, cattle_ref, from_account_id, to_account_id):
        self.pairs.discard((from_account_id, cattle_ref))
        self.pairs.add((to_account_id, cattle_ref))

    async def remove(self, cattle_ref):
        self.pairs = {pair for pair in self.pairs if pair[1] != cattle_ref}


def make_uow():
    state = SimpleNamespace(commits=0, rollbacks=0)
    events: list = []

    async def commit():
        state.commits += 1

    async def rollback():
        state.rollbacks += 1
        events.clear()

    return SimpleNamespace(
        accounts=AccountStore(),
        cattle=CattleStore(),
        holdings=HoldingStore(),
        transfer_requests=TransferStore(),
        identification_requests=IdentificationStore(),
        commit=commit,
        rollback=rollback,
        add_event=events.append,
        events=events,
        state=state,
    )


@pytest.fixture()
def uow():
    return make_uow()
