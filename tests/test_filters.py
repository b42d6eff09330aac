from types import SimpleNamespace

from utils.filters import IsAdmin


async def test_is_admin_checks_membership():
    admin_filter = IsAdmin()
    admins = frozenset({1, 2})

    assert await admin_filter(SimpleNamespace(from_user=SimpleNamespace(id=1)), admin_ids=admins)
    assert not await admin_filter(SimpleNamespace(from_user=SimpleNamespace(id=3)), admin_ids=admins)
    assert not await admin_filter(SimpleNamespace(from_user=None), admin_ids=admins)
