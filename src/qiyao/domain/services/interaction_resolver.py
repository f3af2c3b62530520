from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

from qiyao.domain.errors import InteractionMismatchError, InvalidWinnerError
from qiyao.domain.models.faction import FactionId, FactionState, FactionStats
from qiyao.domain.models.game_state import Interaction, InteractionType, LogCategory
from qiyao.domain.models.location import Location, clamp_progress, coerce_int


class PvpMode(str, Enum):
    BATTLE = "battle"
    NEGOTIATE = "negotiate"
    COOP = "coop"

    @classmethod
    def parse(cls, value: "PvpMode | str") -> "PvpMode":
        if isinstance(value, PvpMode):
            return value
        return cls(str(value or "").strip().lower())


class RewardDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @classmethod
    def parse(cls, value: "RewardDirection | str | None") -> "RewardDirection":
        if isinstance(value, RewardDirection):
            return value
        normalized = str(value or "").strip().lower()
        if normalized in {"backward", "back", "b", "-"}:
            return cls.BACKWARD
        return cls.FORWARD


@dataclass(frozen=True)
class Retreat:
    faction_id: FactionId
    progress: int
    location_name: str
    descriptor: str
    history_text: str


@dataclass(frozen=True)
class TurnResolution:
    """Everything Turn Commit needs to finish a resolved interaction."""

    faction_id: FactionId
    final_progress: int
    final_location_name: str
    log_text: str
    category: LogCategory
    outcome: str
    extra_action: bool = False
    stat_deltas: Optional[FactionStats] = None
    force_skip: bool = False
    retreat: Optional[Retreat] = None


LocationLookup = Callable[[int], Location]
NameLookup = Callable[[FactionId], str]


class InteractionResolver:
    def __init__(self, locate: LocationLookup, name_of: NameLookup) -> None:
        self._locate = locate
        self._name_of = name_of

    def resolve_pvp(
        self,
        interaction: Interaction,
        factions: Mapping[FactionId, FactionState],
        winner: FactionId | str,
        mode: PvpMode | str,
        distance=0,
    ) -> TurnResolution:
        if interaction.type != InteractionType.PVP or interaction.target_faction is None:
            raise InteractionMismatchError("The pending interaction is not a faction clash")
        mode = PvpMode.parse(mode)
        actor = interaction.acting_faction
        target = interaction.target_faction
        winner_id = FactionId.parse(winner)
        if winner_id not in (actor, target):
            raise InvalidWinnerError(f"{winner_id.value} is not part of this clash")

        loser_id = target if winner_id == actor else actor
        retreat_distance = max(0, coerce_int(distance))
        where = interaction.location_name

        if mode == PvpMode.COOP:
            text = (
                f"[Alliance] At {where}, {self._name_of(actor)} and {self._name_of(target)} set aside old grudges "
                "and face the danger together. Neither side gives ground."
            )
            return TurnResolution(
                faction_id=actor,
                final_progress=interaction.pending_progress,
                final_location_name=where,
                log_text=text,
                category=LogCategory.CONFLICT,
                outcome=mode.value,
            )

        if mode == PvpMode.NEGOTIATE:
            text = f"[Parley] At {where}, {self._name_of(loser_id)} chooses to yield and falls back {retreat_distance} li."
            suffix = "yielded"
        else:
            text = (
                f"[Battle] Fierce fighting erupts at {where}! {self._name_of(winner_id)} prevails, "
                f"{self._name_of(loser_id)} retreats {retreat_distance} li."
            )
            suffix = "defeated"

        loser_state = factions[loser_id]
        retreated_progress = clamp_progress(loser_state.progress - retreat_distance)
        retreat = Retreat(
            faction_id=loser_id,
            progress=retreated_progress,
            location_name=self._locate(retreated_progress).name,
            descriptor=f"-{retreat_distance} li ({suffix})",
            history_text=text,
        )
        return TurnResolution(
            faction_id=actor,
            final_progress=interaction.pending_progress,
            final_location_name=where,
            log_text=text,
            category=LogCategory.CONFLICT,
            outcome=mode.value,
            retreat=retreat,
        )

    def resolve_opportunity(
        self,
        interaction: Interaction,
        success: bool,
        direction: RewardDirection | str | None = RewardDirection.FORWARD,
        stat_deltas: FactionStats | Mapping[str, object] | None = None,
        force_skip: bool = False,
        extra_action: bool = False,
        distance=0,
    ) -> TurnResolution:
        if interaction.type != InteractionType.OPPORTUNITY:
            raise InteractionMismatchError("The pending interaction is not an opportunity")
        direction = RewardDirection.parse(direction)
        step = max(0, coerce_int(distance))
        if isinstance(stat_deltas, FactionStats):
            deltas = stat_deltas
        else:
            deltas = FactionStats.from_mapping(stat_deltas, default=0)

        moves_forward = bool(success) and direction == RewardDirection.FORWARD
        offset = step if moves_forward else -step
        final_progress = clamp_progress(interaction.pending_progress + offset)
        final_location = self._locate(final_progress)

        extras = []
        if force_skip:
            extras.append("stalled next turn")
        if extra_action:
            extras.append("acts again")
        fortune = "great fortune" if success else "ill fortune"
        motion = "presses on" if moves_forward else "falls back"
        text = (
            f"[Opportunity] At {interaction.location_name}, {self._name_of(interaction.acting_faction)} meets {fortune}, "
            f"{motion} {step} li to {final_location.name}"
        )
        if extras:
            text += ", " + ", ".join(extras)
        text += "."

        return TurnResolution(
            faction_id=interaction.acting_faction,
            final_progress=final_progress,
            final_location_name=final_location.name,
            log_text=text,
            category=LogCategory.EVENT,
            outcome="success" if success else "failure",
            extra_action=bool(extra_action),
            stat_deltas=deltas,
            force_skip=bool(force_skip),
        )
