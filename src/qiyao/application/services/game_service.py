import copy
import logging
import random
from collections import defaultdict
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, Sequence, cast

from qiyao.application.dtos import (
    ActionResult,
    FactionView,
    GameSnapshotView,
    LogEntryView,
    StandingView,
    TokenPositionView,
)
from qiyao.application.mappers.game_state_mapper import dumps_document, loads_document
from qiyao.application.mappers.view_mapper import (
    to_faction_view,
    to_interaction_view,
    to_log_entry_view,
    to_standing_views,
    to_token_position_view,
)
from qiyao.application.services.event_bus import EventBus
from qiyao.application.services.faction_store import FactionStateStore
from qiyao.application.services.narrative_service import FactionContext, NarrativeService
from qiyao.application.services.turn_scheduler import CommitOutcome, TurnScheduler
from qiyao.domain.errors import (
    GameFormatError,
    NoPendingInteractionError,
    SaveFailedError,
    TurnBlockedError,
)
from qiyao.domain.events import DayCompleted, InteractionOpened, InteractionResolved, TurnCommitted
from qiyao.domain.models.faction import FactionId, FactionState
from qiyao.domain.models.game_state import GameState, Interaction, InteractionType, LogCategory
from qiyao.domain.models.location import Location, clamp_progress, coerce_int
from qiyao.domain.models.path import Point
from qiyao.domain.models.weather import WEATHERS
from qiyao.domain.repositories import FactionProfileRepository, LocationRepository, SaveSlotRepository
from qiyao.domain.services.encounter_detector import (
    DEFAULT_OPPORTUNITY_CHANCE,
    EncounterDetector,
    EncounterKind,
)
from qiyao.domain.services.interaction_resolver import InteractionResolver, TurnResolution


logger = logging.getLogger(__name__)

GATHERING_TEXT = "The Seven Luminaries align over Qiyao Palace. The Nilin blade has surfaced and the seven sects ride for Yunmeng Marsh."
DEFAULT_RECENT_LOG = 12


class GameService:
    def __init__(
        self,
        location_repo: LocationRepository,
        profile_repo: FactionProfileRepository,
        narrative_service: NarrativeService | None = None,
        event_bus: EventBus | None = None,
        save_slot_repo: SaveSlotRepository | None = None,
        rng: random.Random | None = None,
        opportunity_chance: float = DEFAULT_OPPORTUNITY_CHANCE,
        weathers: Sequence[str] = WEATHERS,
    ) -> None:
        self.location_repo = location_repo
        self.profile_repo = profile_repo
        self.narrative_service = narrative_service or NarrativeService()
        self.event_bus = event_bus or EventBus()
        self.save_slot_repo = save_slot_repo
        self.rng = rng or random.Random()
        self.detector = EncounterDetector(self.rng, opportunity_chance)
        self.scheduler = TurnScheduler(self.rng, weathers)
        self.resolver = InteractionResolver(self.location_repo.for_progress, self.profile_repo.display_name)
        self.state: Optional[GameState] = None
        self.interaction: Optional[Interaction] = None
        self._turn_in_flight = False

    @property
    def turn_in_flight(self) -> bool:
        return self._turn_in_flight

    def _require_state(self) -> GameState:
        if self.state is None:
            self.initialize()
        return cast(GameState, self.state)

    def _require_interaction(self) -> Interaction:
        if self.interaction is None:
            raise NoPendingInteractionError("No interaction is waiting for a ruling")
        return self.interaction

    @contextmanager
    def _atomic(self) -> Iterator[GameState]:
        """Run a mutation against the live state, restoring a deep copy if it raises."""

        state_before = copy.deepcopy(self.state)
        interaction_before = self.interaction
        try:
            yield self._require_state()
        except Exception:
            self.state = state_before
            self.interaction = interaction_before
            raise

    def _publish(self, event: object) -> None:
        self.event_bus.publish(event)

    def _publish_commit(self, outcome: CommitOutcome, *, was_skipped: bool, extra_action: bool) -> None:
        state = self._require_state()
        self._publish(
            TurnCommitted(
                faction_id=outcome.faction_id.value,
                day=outcome.completed_day,
                progress_after=outcome.progress_after,
                location_name=outcome.location_name,
                descriptor=outcome.descriptor,
                was_skipped=was_skipped,
                extra_action=extra_action,
            )
        )
        if outcome.day_rolled:
            self._publish(DayCompleted(completed_day=outcome.completed_day, next_day=state.day, weather=state.weather))

    def _context(self, faction: FactionState, progress: Optional[int] = None) -> FactionContext:
        profile = self.profile_repo.get(faction.id)
        return FactionContext(
            faction_id=faction.id,
            name=profile.name,
            title=profile.title,
            progress=int(faction.progress if progress is None else progress),
            stats=faction.stats.as_dict(),
        )

    def _commit_message(self, outcome: CommitOutcome) -> str:
        return f"{self.profile_repo.display_name(outcome.faction_id)}: {outcome.descriptor}, now at {outcome.location_name}."

    def _result_for_commit(self, outcome: CommitOutcome, log_text: str) -> ActionResult:
        messages = [log_text, self._commit_message(outcome)]
        if outcome.day_rolled:
            state = self._require_state()
            messages.append(f"Day {outcome.completed_day} is over. Day {state.day} dawns under {state.weather}.")
        return ActionResult(messages=messages, turn_committed=True, day_complete=outcome.day_rolled)

    def initialize(
        self,
        faction_ids: Sequence[FactionId | str] | None = None,
        starting_stats=None,
    ) -> GameSnapshotView:
        """Start a fresh race: every sect at the palace, day one, a new sky."""

        if self._turn_in_flight:
            raise TurnBlockedError("Cannot start a new game while a turn is being narrated")
        if faction_ids is not None:
            requested = [FactionId.parse(item) for item in faction_ids]
            if sorted(requested) != sorted(FactionId.ordered()):
                raise ValueError("initialize needs every faction exactly once")

        start = self.location_repo.get_starting_location()
        state = GameState(
            day=1,
            weather=self.scheduler.sample_weather(),
            turn_queue=list(FactionId.ordered()),
            active_index=0,
            factions=FactionStateStore.build_initial(start, starting_stats),
        )
        state.append_log(LogCategory.SYSTEM, GATHERING_TEXT)
        self.state = state
        self.interaction = None
        logger.info("New game initialised; day 1 under %s", state.weather)
        return self.snapshot()

    async def advance_turn(self, distance=5) -> ActionResult:
        """Start the active sect's turn.

        Either commits immediately (skip flag, quiet road) or opens an
        interaction that waits for the arbiter's ruling.
        """

        state = self._require_state()
        if self._turn_in_flight:
            raise TurnBlockedError("A turn is already being narrated")
        if self.interaction is not None:
            raise TurnBlockedError("Resolve the open interaction before advancing")

        actor = state.faction(state.active_faction_id)
        if actor.skip_next_turn:
            return self._commit_skipped(actor)

        self._turn_in_flight = True
        try:
            step = max(0, coerce_int(distance))
            pending = clamp_progress(actor.progress + step)
            destination = self.location_repo.for_progress(pending)
            encounter = self.detector.classify(actor.id, pending, destination, state.factions)

            if encounter.kind == EncounterKind.COLLISION and encounter.other_faction is not None:
                other = state.faction(encounter.other_faction)
                text = await self.narrative_service.conflict_text(
                    self._context(actor, pending), self._context(other), destination.name, state.weather
                )
                return self._open_interaction(
                    Interaction(
                        type=InteractionType.PVP,
                        acting_faction=actor.id,
                        location_name=destination.name,
                        narrative=text,
                        pending_progress=pending,
                        target_faction=other.id,
                    )
                )

            if encounter.kind == EncounterKind.OPPORTUNITY:
                narrative = await self.narrative_service.opportunity(self._context(actor), destination, state.weather)
                return self._open_interaction(
                    Interaction(
                        type=InteractionType.OPPORTUNITY,
                        acting_faction=actor.id,
                        location_name=destination.name,
                        narrative=narrative.packed,
                        pending_progress=pending,
                        title=narrative.title,
                    )
                )

            move = await self.narrative_service.move_text(
                self._context(actor, pending), destination, state.day, state.weather, pending - actor.progress
            )
            return self._commit_move(actor.id, destination, f"[{move.summary}] {move.text}")
        finally:
            self._turn_in_flight = False

    def _commit_skipped(self, actor: FactionState) -> ActionResult:
        name = self.profile_repo.display_name(actor.id)
        text = f"[Stalled] Still reeling from earlier events, {name} cannot act this turn."
        with self._atomic() as state:
            outcome = self.scheduler.commit(
                state,
                actor.id,
                actor.progress,
                actor.current_location_name,
                text,
                was_skipped=True,
            )
        self._publish_commit(outcome, was_skipped=True, extra_action=False)
        return self._result_for_commit(outcome, text)

    def _commit_move(self, faction_id: FactionId, destination: Location, text: str) -> ActionResult:
        with self._atomic() as state:
            outcome = self.scheduler.commit(state, faction_id, destination.index, destination.name, text)
        self._publish_commit(outcome, was_skipped=False, extra_action=False)
        return self._result_for_commit(outcome, text)

    def _open_interaction(self, interaction: Interaction) -> ActionResult:
        self.interaction = interaction
        self._publish(
            InteractionOpened(
                interaction_type=interaction.type.value,
                acting_faction_id=interaction.acting_faction.value,
                target_faction_id=interaction.target_faction.value if interaction.target_faction else None,
                location_name=interaction.location_name,
                pending_progress=interaction.pending_progress,
            )
        )
        name = self.profile_repo.display_name(interaction.acting_faction)
        if interaction.type == InteractionType.PVP and interaction.target_faction is not None:
            headline = f"Clash at {interaction.location_name}: {name} meets {self.profile_repo.display_name(interaction.target_faction)}."
        else:
            headline = f"Opportunity at {interaction.location_name} for {name}: {interaction.title}."
        return ActionResult(messages=[headline], interaction_opened=True)

    def _finish_interaction(self, interaction: Interaction, resolution: TurnResolution) -> ActionResult:
        with self._atomic() as state:
            store = FactionStateStore(state.factions)
            if resolution.retreat is not None:
                store.apply_retreat(resolution.retreat, state.day)
            store.apply_stat_deltas(resolution.faction_id, resolution.stat_deltas)
            if resolution.force_skip:
                store.flag_skip(resolution.faction_id)
            outcome = self.scheduler.commit(
                state,
                resolution.faction_id,
                resolution.final_progress,
                resolution.final_location_name,
                resolution.log_text,
                action_again=resolution.extra_action,
                category=resolution.category,
            )
            self.interaction = None

        self._publish(
            InteractionResolved(
                interaction_type=interaction.type.value,
                acting_faction_id=interaction.acting_faction.value,
                outcome=resolution.outcome,
                final_progress=outcome.progress_after,
            )
        )
        self._publish_commit(outcome, was_skipped=False, extra_action=resolution.extra_action)
        return self._result_for_commit(outcome, resolution.log_text)

    def resolve_pvp(self, winner_id: FactionId | str, mode: str = "battle", distance=5) -> ActionResult:
        interaction = self._require_interaction()
        state = self._require_state()
        resolution = self.resolver.resolve_pvp(interaction, state.factions, winner_id, mode, distance)
        return self._finish_interaction(interaction, resolution)

    def resolve_opportunity(
        self,
        success: bool,
        reward_direction: str = "forward",
        stat_deltas: Mapping[str, object] | None = None,
        skip_flag: bool = False,
        extra_action_flag: bool = False,
        distance=5,
    ) -> ActionResult:
        interaction = self._require_interaction()
        resolution = self.resolver.resolve_opportunity(
            interaction,
            bool(success),
            reward_direction,
            stat_deltas,
            force_skip=bool(skip_flag),
            extra_action=bool(extra_action_flag),
            distance=distance,
        )
        return self._finish_interaction(interaction, resolution)

    def edit_stat(self, faction_id: FactionId | str, stat_name: str, value) -> FactionView:
        with self._atomic() as state:
            faction = FactionStateStore(state.factions).edit_stat(faction_id, stat_name, value)
        return self._faction_view(faction)

    def set_path(self, points: Sequence[object] | None) -> Optional[list[Point]]:
        """Attach the drawn route. Fewer than two usable points clears it."""

        parsed: list[Point] = []
        for row in points or ():
            if isinstance(row, Point):
                parsed.append(row)
            elif isinstance(row, Mapping):
                parsed.append(Point.from_mapping(row))
            else:
                x, y = row
                parsed.append(Point(x=float(x), y=float(y)))
        with self._atomic() as state:
            state.path = parsed if len(parsed) > 1 else None
        return state.path

    def save(self) -> str:
        return dumps_document(self._require_state())

    def load(self, document: str) -> GameSnapshotView:
        if self._turn_in_flight:
            raise TurnBlockedError("Cannot load while a turn is being narrated")
        state = loads_document(document, self.location_repo.for_progress)
        self.state = state
        self.interaction = None
        logger.info("Loaded game at day %s", state.day)
        return self.snapshot()

    def save_to_slot(self, slot_name: str) -> str:
        if self.save_slot_repo is None:
            raise SaveFailedError("No save slot storage is configured")
        slot = str(slot_name or "").strip()
        if not slot:
            raise SaveFailedError("Save slot name cannot be empty")
        document = self.save()
        try:
            self.save_slot_repo.save(slot, document, self._require_state().day)
        except Exception as exc:
            raise SaveFailedError(f"Could not write save slot {slot!r}: {exc}") from exc
        return slot

    def load_from_slot(self, slot_name: str) -> GameSnapshotView:
        if self.save_slot_repo is None:
            raise GameFormatError("No save slot storage is configured")
        document = self.save_slot_repo.load(str(slot_name or "").strip())
        if document is None:
            raise GameFormatError(f"Save slot {slot_name!r} is empty")
        return self.load(document)

    def list_save_slots(self) -> list[str]:
        if self.save_slot_repo is None:
            return []
        return self.save_slot_repo.list_slots()

    def _faction_view(self, faction: FactionState) -> FactionView:
        state = self._require_state()
        return to_faction_view(
            state=faction,
            profile=self.profile_repo.get(faction.id),
            location=self.location_repo.for_progress(faction.progress),
            is_active=faction.id == state.active_faction_id,
            path=state.path,
        )

    def snapshot(self, recent_log: int = DEFAULT_RECENT_LOG) -> GameSnapshotView:
        state = self._require_state()
        store = FactionStateStore(state.factions)
        interaction_view = None
        if self.interaction is not None:
            target = self.interaction.target_faction
            interaction_view = to_interaction_view(
                self.interaction,
                acting_name=self.profile_repo.display_name(self.interaction.acting_faction),
                target_name=self.profile_repo.display_name(target) if target else "",
            )
        limit = max(0, int(recent_log))
        entries = state.global_log[-limit:] if limit else []
        return GameSnapshotView(
            day=state.day,
            weather=state.weather,
            active_faction_id=state.active_faction_id.value,
            active_faction_name=self.profile_repo.display_name(state.active_faction_id),
            is_day_complete=state.is_day_complete,
            turn_in_flight=self._turn_in_flight,
            factions=[self._faction_view(faction) for faction in store.read_all()],
            interaction=interaction_view,
            recent_log=[to_log_entry_view(entry) for entry in entries],
        )

    def standings(self) -> list[StandingView]:
        state = self._require_state()
        names = {faction_id: self.profile_repo.display_name(faction_id) for faction_id in FactionId.ordered()}
        return to_standing_views(FactionStateStore(state.factions).list_all(), names)

    def log_by_day(self) -> dict[int, list[LogEntryView]]:
        grouped: dict[int, list[LogEntryView]] = defaultdict(list)
        for entry in self._require_state().global_log:
            grouped[int(entry.day)].append(to_log_entry_view(entry))
        return dict(grouped)

    def token_positions(self) -> list[TokenPositionView]:
        state = self._require_state()
        return [to_token_position_view(faction, state.path) for faction in FactionStateStore(state.factions).list_all()]
