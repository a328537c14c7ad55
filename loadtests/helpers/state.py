"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State keeps the ids returned by creation endpoints so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated member from cart to order."""

    member_id: str | None = None
    token: str | None = None
    line_count: int = 0
    total_amount: int = 0
    order_ids: list[str] = field(default_factory=list)
    sold_out: int = 0


@dataclass
class AdminState:
    """Tracks what a simulated administrator created."""

    token: str | None = None
    promotion_ids: list[str] = field(default_factory=list)
    sweeps: int = 0
