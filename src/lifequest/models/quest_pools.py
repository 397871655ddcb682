"""Quest template pools and calendar events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from lifequest.models.enums import ItemRarity, ItemType, ReputationType
from lifequest.models.items import Item, StatBonus
from lifequest.models.quests import QuestTemplate


H, D, CR = ReputationType.HEROISM, ReputationType.DISCIPLINE, ReputationType.CREATIVITY
C, U, R, E, L = (
    ItemRarity.COMMON,
    ItemRarity.UNCOMMON,
    ItemRarity.RARE,
    ItemRarity.EPIC,
    ItemRarity.LEGENDARY,
)


def _t(title: str, description: str, rep: ReputationType, difficulty: int, rarity: ItemRarity) -> QuestTemplate:
    return QuestTemplate(
        title=title,
        description=description,
        reputation_type=rep,
        difficulty=difficulty,
        rarity=rarity,
    )


DAILY_QUEST_POOL: tuple[QuestTemplate, ...] = (
    _t("Water of Life", "Drink 2 litres of water.", D, 1, C),
    _t("Morning Drill", "Stretch or exercise for 10 minutes.", D, 2, C),
    _t("Wanderer's Path", "Walk outdoors for 30 minutes.", D, 2, C),
    _t("Quiet Meal", "Eat breakfast without gadgets.", D, 1, C),
    _t("Chronicle of Victories", "Write down 3 good things from today.", CR, 2, C),
    _t("Warrior's Strength", "Do 15 push-ups.", H, 3, U),
    _t("Ancient Wisdom", "Read 10 pages of a book.", CR, 2, C),
    _t("Gift of Words", "Thank someone sincerely.", H, 1, C),
    _t("Food of Heroes", "Cook a healthy dinner.", D, 3, U),
    _t("Contemplation", "Spend 5 minutes in complete silence.", D, 2, C),
    _t("Ordered Mind", "Tidy up your desk.", D, 1, C),
    _t("Fortitude", "Do 20 squats.", H, 2, C),
    _t("Strategy", "Plan 3 goals for tomorrow.", D, 2, C),
    _t("Sincerity", "Give an honest compliment.", H, 1, C),
    _t("Evening Ritual", "Dim the lights 30 minutes before bed.", D, 2, C),
    _t("Gifts of Nature", "Eat 2 servings of vegetables.", D, 2, C),
    _t("Breath of Life", "Practice breathing for 5 minutes.", D, 2, C),
    _t("Clear Mind", "No phone for the first hour of the day.", D, 3, U),
    _t("Stillness", "Turn off screens an hour before bed.", D, 3, U),
    _t("Call of Kin", "Call family or a close friend.", H, 2, C),
)

WEEKLY_QUEST_POOL: tuple[QuestTemplate, ...] = (
    _t("Endurance", "Run 10 km in total this week.", D, 4, U),
    _t("Mind Cleanse", "Spend 5 hours in total without gadgets.", D, 3, U),
    _t("Alchemy of Taste", "Cook 3 new dishes.", CR, 4, U),
    _t("Athlete's Path", "Complete 5 workouts of 30 minutes.", H, 5, R),
    _t("Librarian", "Read more than 150 pages.", CR, 5, R),
    _t("Benefactor", "Help 3 people with their tasks.", H, 3, U),
    _t("Deep Clean", "Clean your whole home.", D, 4, U),
    _t("Commander's Report", "Review the week and set goals.", D, 3, U),
    _t("Scouting", "Visit a new place in town.", CR, 4, U),
    _t("Asceticism", "Cut sweets to a minimum.", D, 5, R),
    _t("Meditation", "Practice mindfulness 7 days in a row.", D, 4, U),
    _t("Treasurer", "Track expenses all week.", D, 3, U),
    _t("Forced March", "10,000 steps for 5 days in a row.", D, 5, R),
    _t("Apprentice", "Learn a new topic from an article or lesson.", CR, 4, U),
    _t("Thrift", "Spend a day without spending money.", D, 3, U),
    _t("Chronicler", "Write 3 journal entries.", CR, 3, U),
    _t("Maker", "Draw or build something.", CR, 4, U),
    _t("Blood Oath", "Donate blood.", H, 5, R),
    _t("Gathering", "Attend a community event.", H, 5, R),
    _t("Archivist", "Sort your digital files and photos.", D, 4, U),
)

ONETIME_QUEST_POOL: tuple[QuestTemplate, ...] = (
    _t("The Dream", "Describe your greatest dream.", CR, 2, C),
    _t("Reverence", "Thank your parents for everything.", H, 2, C),
    _t("Healing the Soul", "Visit a therapist.", D, 5, R),
    _t("Autobiography", "Write the story of your life.", CR, 4, U),
    _t("Dossier", "Write a professional resume.", D, 3, U),
    _t("Service", "Apply as a volunteer.", H, 3, U),
    _t("Distant Lands", "Visit a new country.", CR, 6, L),
    _t("Marathon", "Run a marathon distance.", D, 5, E),
    _t("Voice of the People", "Start your own blog or website.", CR, 4, R),
    _t("Charioteer", "Get a driving licence.", D, 4, R),
    _t("Treasury", "Start a personal budget.", D, 2, C),
    _t("Secret Santa", "Give a gift to a stranger.", H, 3, U),
    _t("Druid", "Plant a tree.", H, 3, U),
    _t("Letter to the Future", "Write a letter to your future self.", CR, 3, U),
    _t("Rally the Companions", "Organise a meetup with friends.", H, 3, U),
    _t("Ancestral Code", "Take a genetic ancestry test.", CR, 5, E),
    _t("Mentor", "Find a mentor or teacher.", D, 4, R),
    _t("Personal Crest", "Polish your social profiles.", CR, 4, U),
    _t("Orator", "Speak in public.", H, 4, R),
    _t("Own Venture", "Launch your own project.", CR, 6, E),
)


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class EventDefinition:
    """A quest injected on a fixed calendar day.

    Attributes:
        quest_id: Stable id so the event fires once per save.
        month: Calendar month (1-12).
        day: Day of month.
        template: Quest text.
        reward_item: Item granted on completion.
    """

    quest_id: str
    month: int
    day: int
    template: QuestTemplate
    reward_item: Item

    def matches(self, day: date) -> bool:
        """Whether the event is live on ``day``."""
        return day.month == self.month and day.day == self.day


def _event_item(item_id: str, name: str, item_type: ItemType, effect: str, stats: StatBonus | None = None) -> Item:
    return Item(
        id=item_id,
        base_id=item_id,
        name=name,
        type=item_type,
        rarity=ItemRarity.EPIC,
        price=0,
        level_req=1,
        effect=effect,
        stats=stats or StatBonus(),
    )


EVENT_DEFINITIONS: tuple[EventDefinition, ...] = (
    EventDefinition(
        quest_id="evt_0",
        month=12,
        day=31,
        template=_t("New Year Miracle", "Send greetings to 5 friends.", H, 3, E),
        reward_item=_event_item("evt_santa", "Winter Hat", ItemType.HEAD, "+10% XP in winter", StatBonus(vitality=5)),
    ),
    EventDefinition(
        quest_id="evt_1",
        month=4,
        day=22,
        template=_t("Earth Day", "Plant something or clean up outdoors.", H, 3, E),
        reward_item=_event_item("evt_nature", "Ring of Nature", ItemType.RING, "+15% resistance"),
    ),
    EventDefinition(
        quest_id="evt_2",
        month=10,
        day=31,
        template=_t("Halloween", "Carve or draw a pumpkin.", CR, 3, E),
        reward_item=_event_item("evt_ghost", "Ghost Mask", ItemType.HEAD, "+20% damage in the Necropolis"),
    ),
)


__all__ = [
    "DAILY_QUEST_POOL",
    "WEEKLY_QUEST_POOL",
    "ONETIME_QUEST_POOL",
    "EventDefinition",
    "EVENT_DEFINITIONS",
]
