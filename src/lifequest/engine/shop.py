"""Shop: rotating stock, discounts, buying and bag expansion."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from lifequest.core.constants import (
    INVENTORY_EXPANSION_COST,
    INVENTORY_EXPANSION_SLOTS,
    SHOP_MAX_DISCOUNT,
    SHOP_RANDOM_STOCK,
    SHOP_RARE_CHANCE,
    SHOP_REFRESH_MINUTES,
)
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller, get_roller
from lifequest.engine.inventory import add_item_to_inventory, can_add_item
from lifequest.engine.loot import generate_random_item
from lifequest.models.base import utcnow
from lifequest.models.catalog import HEALTH_POTION
from lifequest.models.enums import ItemRarity
from lifequest.models.game_state import ActionResult, GameState, ShopState
from lifequest.models.progression import discounted_price


logger = get_logger(__name__)


def roll_discount(level: int, streak: int, total_reputation: int, roller: DiceRoller) -> int:
    """Roll the store-wide discount percentage for a refresh.

    The chance grows with level and visit streak; the size grows with total
    reputation and is capped at 50%.

    Returns:
        Discount in percent, 0 when no sale is running.
    """
    chance = 15 + level / 5 + streak / 10
    if roller.percent() >= chance:
        return 0
    charisma = total_reputation // 200
    return math.floor(min(SHOP_MAX_DISCOUNT, 10 + roller.randint(0, 19) + charisma / 10))


def refresh_shop(
    state: GameState,
    now: datetime | None = None,
    *,
    roller: DiceRoller | None = None,
) -> GameState:
    """Roll new stock and discounts, increasing the visit streak."""
    dice = get_roller(roller)
    now = now or utcnow()
    character = state.require_character()
    level = character.level
    streak = state.shop_state.visit_streak + 1

    stock = [
        HEALTH_POTION.instantiate(),
        generate_random_item(level, ItemRarity.COMMON, roller=dice),
        generate_random_item(level, ItemRarity.UNCOMMON, roller=dice),
    ]
    for _ in range(SHOP_RANDOM_STOCK):
        forced = ItemRarity.RARE if dice.chance(SHOP_RARE_CHANCE) else None
        stock.append(generate_random_item(level, forced, roller=dice))

    discount = roll_discount(level, streak, character.total_reputation, dice)
    discounts = {item.id: discount for item in stock} if discount else {}
    if discount:
        logger.info("Shop sale", discount=discount, streak=streak)

    shop = ShopState(items=stock, discounts=discounts, last_update=now, visit_streak=streak)
    return state.model_copy(update={"shop_state": shop})


def is_shop_stale(state: GameState, now: datetime) -> bool:
    """Whether the stock is empty or older than the refresh window."""
    shop = state.shop_state
    return not shop.items or now - shop.last_update > timedelta(minutes=SHOP_REFRESH_MINUTES)


def open_shop(
    state: GameState,
    now: datetime | None = None,
    *,
    roller: DiceRoller | None = None,
) -> ActionResult:
    """Visit the shop, refreshing stale stock."""
    now = now or utcnow()
    if not is_shop_stale(state, now):
        return ActionResult.ok(state)
    refreshed = refresh_shop(state, now, roller=roller)
    discount = max(refreshed.shop_state.discounts.values(), default=0)
    message = f"Sale in the shop: -{discount}%" if discount else "New stock arrived"
    return ActionResult.ok(refreshed, message)


def shop_price(shop: ShopState, item_id: str) -> int | None:
    """Current price of a listed item, None if it is not listed."""
    for item in shop.items:
        if item.id == item_id:
            return discounted_price(item.price, shop.discounts.get(item.id, 0))
    return None


def buy_item(state: GameState, shop_item_id: str) -> ActionResult:
    """Buy one unit of a listed item. Resets the visit streak."""
    character = state.require_character()
    item = next((listed for listed in state.shop_state.items if listed.id == shop_item_id), None)
    if item is None:
        return ActionResult.fail(state, "Item is not on sale")
    price = shop_price(state.shop_state, item.id) or 0
    if character.gold < price:
        return ActionResult.fail(state, "Not enough gold")
    if not can_add_item(character, item):
        return ActionResult.fail(state, "Inventory is full")

    updated = add_item_to_inventory(character, item)
    updated = updated.model_copy(update={"gold": updated.gold - price})
    shop = state.shop_state.model_copy(update={"visit_streak": 0})
    logger.info("Item bought", item=item.name, price=price)
    return ActionResult.ok(
        state.model_copy(update={"character": updated, "shop_state": shop}),
        f"Bought {item.name}",
    )


def buy_inventory_slots(state: GameState) -> ActionResult:
    """Expand the bag by five slots for 1000 gold."""
    character = state.require_character()
    if character.gold < INVENTORY_EXPANSION_COST:
        return ActionResult.fail(state, f"Requires {INVENTORY_EXPANSION_COST} gold")
    updated = character.model_copy(
        update={
            "gold": character.gold - INVENTORY_EXPANSION_COST,
            "inventory_slots": character.inventory_slots + INVENTORY_EXPANSION_SLOTS,
        }
    )
    return ActionResult.ok(state.with_character(updated), f"Bag expanded by {INVENTORY_EXPANSION_SLOTS} slots")


__all__ = [
    "roll_discount",
    "refresh_shop",
    "is_shop_stale",
    "open_shop",
    "shop_price",
    "buy_item",
    "buy_inventory_slots",
]
