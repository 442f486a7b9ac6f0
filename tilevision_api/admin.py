"""
Admin dashboard data.

The admin pages are backed by static mock data: dashboard figures, the credit
ledger and the organization's tile collection. Balances are computed for
display only; credits are never enforced.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable, Optional

from tilevision_api.catalog import TileCatalog, get_catalog
from tilevision_api.models import (
    ActivityItem,
    AdminTile,
    CreditLedgerEntry,
    DashboardResponse,
    DashboardStats,
    LowCreditUser,
    MonthlyRenderCount,
)

_LEDGER_DATE = datetime(2024, 6, 1, tzinfo=timezone.utc)

LEDGER_ENTRIES: tuple[CreditLedgerEntry, ...] = (
    CreditLedgerEntry(id="TXN1001", user_id="user1", reason="Initial Top-up", debit=0, credit=500, created_at=_LEDGER_DATE),
    CreditLedgerEntry(id="TXN1002", user_id="user1", reason="Render Job #RND-8219", debit=1, credit=0, created_at=_LEDGER_DATE),
    CreditLedgerEntry(id="TXN1003", user_id="user2", reason="Initial Top-up", debit=0, credit=100, created_at=_LEDGER_DATE),
    CreditLedgerEntry(id="TXN1004", user_id="user1", reason="Refund for failed Job #RND-8210", debit=0, credit=1, created_at=_LEDGER_DATE),
    CreditLedgerEntry(id="TXN1005", user_id="user2", reason="Render Job #RND-8220", debit=1, credit=0, created_at=_LEDGER_DATE),
)

RENDER_HISTORY: tuple[MonthlyRenderCount, ...] = (
    MonthlyRenderCount(month="January", success=186, failed=80),
    MonthlyRenderCount(month="February", success=305, failed=200),
    MonthlyRenderCount(month="March", success=237, failed=120),
    MonthlyRenderCount(month="April", success=73, failed=190),
    MonthlyRenderCount(month="May", success=209, failed=130),
    MonthlyRenderCount(month="June", success=214, failed=140),
)

RECENT_ACTIVITY: tuple[ActivityItem, ...] = (
    ActivityItem(
        user_name="Olivia Martin",
        initials="OM",
        avatar_url="https://picsum.photos/seed/user1/40/40",
        description="Completed render job #RND-8219.",
    ),
    ActivityItem(
        user_name="Jackson Lee",
        initials="JL",
        avatar_url="https://picsum.photos/seed/user2/40/40",
        description="Uploaded 12 new tiles.",
    ),
    ActivityItem(
        user_name="Sofia Nguyen",
        initials="SN",
        avatar_url="https://picsum.photos/seed/user3/40/40",
        description="Credit top-up of 500.",
    ),
)

LOW_CREDIT_USERS: tuple[LowCreditUser, ...] = (
    LowCreditUser(
        user_name="John Doe",
        email="john.doe@example.com",
        initials="JD",
        avatar_url="https://picsum.photos/seed/user4/40/40",
        credits=5,
    ),
    LowCreditUser(
        user_name="Alice Wang",
        email="alice.wang@example.com",
        initials="AW",
        avatar_url="https://picsum.photos/seed/user5/40/40",
        credits=2,
    ),
)

DASHBOARD_STATS = DashboardStats(
    total_renders=12405,
    total_renders_change="+15.2% from last month",
    active_users=235,
    active_users_change="+180.1% from last month",
    credits_used=8214,
    credits_used_change="+19% from last month",
    success_rate=98.2,
    success_rate_change="+0.5% from last month",
)


def credit_balances(entries: Iterable[CreditLedgerEntry]) -> dict[str, int]:
    """Sum credits minus debits per user."""
    balances: dict[str, int] = defaultdict(int)
    for entry in entries:
        balances[entry.user_id] += entry.credit - entry.debit
    return dict(balances)


def get_dashboard() -> DashboardResponse:
    return DashboardResponse(
        stats=DASHBOARD_STATS,
        render_history=list(RENDER_HISTORY),
        recent_activity=list(RECENT_ACTIVITY),
        low_credit_users=list(LOW_CREDIT_USERS),
    )


def list_admin_tiles(catalog: Optional[TileCatalog] = None) -> list[AdminTile]:
    """Rows of the tile collection table."""
    catalog = catalog if catalog is not None else get_catalog()
    return [
        AdminTile(
            id=tile.id,
            name=tile.name,
            category=tile.category,
            sku=tile.display_sku,
            image_url=tile.image_url,
        )
        for tile in catalog
    ]
