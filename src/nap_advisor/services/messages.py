"""Display copy for every (time window, sleep category) combination.

Each entry is an independent (message, recommendation) pair. The table is
checked for completeness at import time so a missing combination fails
loudly instead of falling through to a default.
"""

from typing import NamedTuple

from nap_advisor.schemas.advisory import SleepCategory, TimeWindow


class MessagePair(NamedTuple):
    """Headline and recommendation shown to the user."""

    message: str
    recommendation: str


NO_DATA_RECOMMENDATION = (
    "The Oura API is responding, but no sleep data has been fetched yet. "
    "Emily's ring might still be syncing, or something else went wrong upstream."
)

SHOULD_BE_ASLEEP = MessagePair("I Sleep", "Emily SHOULD be asleep right now.")

ALREADY_NAPPED = MessagePair(
    "Not Nap Time",
    "Emily has napped already. Another nap would be silly.",
)

MESSAGE_TABLE: dict[TimeWindow, dict[SleepCategory, MessagePair]] = {
    TimeWindow.OVERNIGHT_SLEEP: {
        SleepCategory.NO_DATA: SHOULD_BE_ASLEEP,
        SleepCategory.SEVERELY_DEPRIVED: SHOULD_BE_ASLEEP,
        SleepCategory.STRUGGLING: SHOULD_BE_ASLEEP,
        SleepCategory.SUFFICIENT: SHOULD_BE_ASLEEP,
        SleepCategory.OVERSLEEP: SHOULD_BE_ASLEEP,
    },
    TimeWindow.PRE_NAP: {
        SleepCategory.NO_DATA: MessagePair("Not Nap Time", NO_DATA_RECOMMENDATION),
        SleepCategory.SEVERELY_DEPRIVED: MessagePair(
            "Not Nap Time",
            "Emily is in shambles. She needs to survive until nap time at 2 PM.",
        ),
        SleepCategory.STRUGGLING: MessagePair(
            "Not Nap Time",
            "Emily has bad sleep habits, and she is ashamed of them. But now is not "
            "the time for a nap. She should try to get more sleep tonight.",
        ),
        SleepCategory.SUFFICIENT: MessagePair(
            "Not Nap Time",
            "Emily got decent sleep. No nap needed yet.",
        ),
        SleepCategory.OVERSLEEP: MessagePair(
            "Not Nap Time",
            "Emily might be getting sick - she slept over 9 hours.",
        ),
    },
    TimeWindow.NAP: {
        SleepCategory.NO_DATA: MessagePair("Unknown", NO_DATA_RECOMMENDATION),
        SleepCategory.SEVERELY_DEPRIVED: MessagePair(
            "NAP TIME",
            "Emily is severely sleep deprived. She should take a nap RIGHT NOW. GO TO BED",
        ),
        SleepCategory.STRUGGLING: MessagePair(
            "Maybe Nap Time",
            "Emily is probably struggling a little. She is probably considering a nap. "
            "Maybe you should, too.",
        ),
        SleepCategory.SUFFICIENT: MessagePair(
            "Not Nap Time",
            "Emily doesn't NEED to nap. But it could be fun. "
            "You never know what might happen during a nap!",
        ),
        SleepCategory.OVERSLEEP: MessagePair(
            "NAP TIME",
            "Emily slept more than 9 hours, which might indicate she's getting sick. "
            "That is way too much sleep.",
        ),
    },
    TimeWindow.POST_NAP: {
        SleepCategory.NO_DATA: MessagePair("Not Nap Time", NO_DATA_RECOMMENDATION),
        SleepCategory.SEVERELY_DEPRIVED: MessagePair("Not Nap Time", "GO TO BED GIRL"),
        SleepCategory.STRUGGLING: MessagePair(
            "Not Nap Time",
            "Emily really should have slept more last night. But it's too late to nap. "
            "She must live with the consequences of her choices until it is time for bed.",
        ),
        SleepCategory.SUFFICIENT: MessagePair(
            "Not Nap Time",
            "Emily is OK. But it is not nap time.",
        ),
        SleepCategory.OVERSLEEP: MessagePair(
            "Not Nap Time",
            "Emily might be getting sick - she slept over 9 hours. Who does that???",
        ),
    },
}


def _check_complete(table: dict[TimeWindow, dict[SleepCategory, MessagePair]]) -> None:
    missing = [
        (window.value, category.value)
        for window in TimeWindow
        for category in SleepCategory
        if category not in table.get(window, {})
    ]
    if missing:
        raise RuntimeError(f"Message table is missing entries: {missing}")


_check_complete(MESSAGE_TABLE)


def lookup(window: TimeWindow, category: SleepCategory) -> MessagePair:
    """Get the display pair for a window and category."""
    return MESSAGE_TABLE[window][category]
