CONTRACT_VERSION = "1.0.0"

COMMAND_INTENTS = (
    "initialize",
    "advance_turn",
    "resolve_pvp",
    "resolve_opportunity",
    "edit_stat",
    "set_path",
    "save",
    "load",
    "save_to_slot",
    "load_from_slot",
)

QUERY_INTENTS = (
    "snapshot",
    "standings",
    "log_by_day",
    "token_positions",
    "list_save_slots",
)

CONTRACT_DTO_TYPES = (
    "ActionResult",
    "FactionView",
    "GameSnapshotView",
    "InteractionView",
    "LogEntryView",
    "StandingView",
    "TokenPositionView",
)
