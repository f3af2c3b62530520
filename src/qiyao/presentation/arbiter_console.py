import asyncio
import shlex
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qiyao.application.dtos import ActionResult, GameSnapshotView
from qiyao.application.services.game_service import GameService
from qiyao.domain.errors import (
    GameFormatError,
    InteractionMismatchError,
    InvalidStatError,
    InvalidWinnerError,
    NoPendingInteractionError,
    SaveFailedError,
    TurnBlockedError,
)
from qiyao.domain.models.faction import STAT_NAMES
from qiyao.domain.models.location import coerce_int
from qiyao.infrastructure.save_files import export_document, import_document


_CONSOLE = Console()
_BORDER_DAY = "yellow"
_BORDER_CLASH = "red"
_BORDER_FORTUNE = "magenta"
_BORDER_LOG = "cyan"
_BORDER_HELP = "green"
_DEFAULT_DISTANCE = 5

_ARBITER_ERRORS = (
    GameFormatError,
    InteractionMismatchError,
    InvalidStatError,
    InvalidWinnerError,
    NoPendingInteractionError,
    SaveFailedError,
    TurnBlockedError,
    ValueError,
)

HELP_LINES = [
    "[bold]Arbiter commands[/bold]",
    *(
        escape(line)
        for line in (
            "next [li]                      advance the active sect (default 5 li)",
            "battle <winner> [li]           settle a clash by arms; the loser retreats",
            "negotiate <winner> [li]        settle a clash by parley; the other side yields",
            "coop                           the two sects face the danger together",
            "fortune <success|failure> [forward|backward] [li] [stat=+n ...] [skip] [extra]",
            "stat <sect> <stat> <value>     correct a stat by hand",
            "path <x,y> <x,y> ... | path clear",
            "standings | log [day] | positions",
            "save <slot> | load <slot> | slots",
            "export <file> | import <file>",
            "help | quit",
        )
    ),
]


def _ornate_title(title: str) -> str:
    return f"[bold yellow]{title}[/bold yellow]"


def _render_message_panel(console: Console, title: str, lines: list[str], *, border_style: str = _BORDER_DAY) -> None:
    rows = [str(line) for line in lines if str(line).strip()]
    body = "\n".join(rows) if rows else "No updates."
    console.print(Panel.fit(body, title=_ornate_title(title), border_style=border_style))


def render_snapshot(console: Console, view: GameSnapshotView) -> None:
    header = f"Day {view.day} | {view.weather} | {view.active_faction_name} to act"
    if view.is_day_complete:
        header += " | a new day has dawned"
    table = Table(title=header, title_style="bold yellow")
    table.add_column("Sect", style="bold")
    table.add_column("Li", justify="right")
    table.add_column("Location")
    table.add_column("Last move")
    for stat_name in STAT_NAMES:
        table.add_column(stat_name.title(), justify="right")
    for faction in view.factions:
        marker = "> " if faction.is_active else ""
        name = f"{marker}[{faction.colour}]{faction.name}[/{faction.colour}]"
        if faction.skip_next_turn:
            name += " (stalled)"
        table.add_row(
            name,
            str(faction.progress),
            faction.location_name,
            faction.last_move_descriptor,
            *[str(faction.stats.get(stat_name, 0)) for stat_name in STAT_NAMES],
        )
    console.print(table)

    interaction = view.interaction
    if interaction is None:
        return
    if interaction.type == "PVP":
        _render_message_panel(
            console,
            f"Clash at {interaction.location_name}",
            [
                f"{interaction.acting_faction_name} meets {interaction.target_faction_name}.",
                escape(interaction.narrative),
                escape("Rule with: battle <winner> [li] | negotiate <winner> [li] | coop"),
            ],
            border_style=_BORDER_CLASH,
        )
        return
    _render_message_panel(
        console,
        interaction.title or "Opportunity",
        [
            f"{interaction.acting_faction_name} at {interaction.location_name}.",
            escape(interaction.narrative),
            f"[dim]{escape(interaction.arbiter_notes)}[/dim]",
            escape("Rule with: fortune <success|failure> [forward|backward] [li] [stat=+n ...] [skip] [extra]"),
        ],
        border_style=_BORDER_FORTUNE,
    )


def _render_result(console: Console, result: ActionResult) -> None:
    title = "Turn"
    if result.interaction_opened:
        title = "The road turns"
    elif result.day_complete:
        title = "Dusk"
    _render_message_panel(console, title, [escape(message) for message in result.messages])


def parse_fortune_args(tokens: list[str]) -> dict:
    """Turn ``success forward 5 martial=+2 skip`` into resolve_opportunity keyword arguments."""

    if not tokens:
        raise ValueError("fortune needs success or failure")
    outcome = tokens[0].strip().lower()
    if outcome not in {"success", "failure", "s", "f"}:
        raise ValueError("fortune needs success or failure")
    options = {
        "success": outcome.startswith("s"),
        "reward_direction": "forward",
        "stat_deltas": {},
        "skip_flag": False,
        "extra_action_flag": False,
        "distance": _DEFAULT_DISTANCE,
    }
    for token in tokens[1:]:
        lowered = token.strip().lower()
        if lowered in {"forward", "backward"}:
            options["reward_direction"] = lowered
        elif lowered == "skip":
            options["skip_flag"] = True
        elif lowered == "extra":
            options["extra_action_flag"] = True
        elif "=" in lowered:
            stat_name, _, raw = lowered.partition("=")
            if stat_name not in STAT_NAMES:
                raise ValueError(f"Unknown stat {stat_name!r}")
            options["stat_deltas"][stat_name] = coerce_int(raw)
        else:
            options["distance"] = max(0, coerce_int(lowered))
    return options


def parse_path_points(tokens: list[str]) -> list[tuple[float, float]]:
    points = []
    for token in tokens:
        x_raw, sep, y_raw = token.partition(",")
        if not sep:
            raise ValueError(f"Path point {token!r} must look like x,y")
        points.append((float(x_raw), float(y_raw)))
    return points


class ArbiterConsole:
    def __init__(
        self,
        game_service: GameService,
        *,
        console: Console | None = None,
        input_fn: Callable[[str], str] | None = None,
    ) -> None:
        self.game_service = game_service
        self.console = console or _CONSOLE
        self.input_fn = input_fn or self.console.input

    def run(self) -> None:
        if self.game_service.state is None:
            self.game_service.initialize()
        _render_message_panel(
            self.console,
            "Qiyao: War for the Nilin Blade",
            ["Seven sects ride for Yunmeng Marsh. Type 'help' for commands."],
        )
        render_snapshot(self.console, self.game_service.snapshot())
        while True:
            try:
                line = self.input_fn("[bold yellow]arbiter>[/bold yellow] ")
            except EOFError:
                break
            if not self.handle(line):
                break
        _render_message_panel(self.console, "Farewell", ["The road to Yunmeng Marsh waits for another day."])

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the arbiter quits."""

        try:
            tokens = shlex.split(str(line or ""))
        except ValueError as exc:
            self.console.print(f"[red]{escape(str(exc))}[/red]")
            return True
        if not tokens:
            return True
        command, args = tokens[0].lower(), tokens[1:]
        if command in {"quit", "exit", "q"}:
            return False
        try:
            self._dispatch(command, args)
        except _ARBITER_ERRORS as exc:
            self.console.print(f"[red]{escape(str(exc))}[/red]")
        return True

    def _dispatch(self, command: str, args: list[str]) -> None:
        service = self.game_service
        if command in {"next", "n", "advance"}:
            distance = coerce_int(args[0], _DEFAULT_DISTANCE) if args else _DEFAULT_DISTANCE
            result = asyncio.run(service.advance_turn(distance))
            _render_result(self.console, result)
            render_snapshot(self.console, service.snapshot())
        elif command in {"battle", "negotiate"}:
            if not args:
                raise ValueError(f"{command} needs the winning sect")
            distance = coerce_int(args[1], _DEFAULT_DISTANCE) if len(args) > 1 else _DEFAULT_DISTANCE
            result = service.resolve_pvp(args[0], command, distance)
            _render_result(self.console, result)
            render_snapshot(self.console, service.snapshot())
        elif command == "coop":
            interaction = service.interaction
            winner = interaction.acting_faction if interaction is not None else ""
            result = service.resolve_pvp(winner, "coop", 0)
            _render_result(self.console, result)
            render_snapshot(self.console, service.snapshot())
        elif command == "fortune":
            result = service.resolve_opportunity(**parse_fortune_args(args))
            _render_result(self.console, result)
            render_snapshot(self.console, service.snapshot())
        elif command == "stat":
            if len(args) < 3:
                raise ValueError("stat needs <sect> <stat> <value>")
            view = service.edit_stat(args[0], args[1], args[2])
            self.console.print(f"{view.name}: {args[1].lower()} is now {view.stats.get(args[1].lower(), 0)}")
        elif command == "path":
            if args and args[0].lower() == "clear":
                service.set_path(None)
                self.console.print("Route cleared.")
            else:
                points = service.set_path(parse_path_points(args))
                self.console.print(f"Route set with {len(points or [])} points.")
        elif command == "standings":
            self._render_standings()
        elif command == "log":
            self._render_log(coerce_int(args[0], 0) if args else 0)
        elif command == "positions":
            table = Table(title="Token positions")
            table.add_column("Sect")
            table.add_column("x", justify="right")
            table.add_column("y", justify="right")
            for row in service.token_positions():
                table.add_row(row.faction_id, f"{row.x:.1f}", f"{row.y:.1f}")
            self.console.print(table)
        elif command == "save":
            slot = service.save_to_slot(args[0] if args else "quick")
            self.console.print(f"Saved to slot {slot}.")
        elif command == "load":
            view = service.load_from_slot(args[0] if args else "quick")
            render_snapshot(self.console, view)
        elif command == "slots":
            slots = service.list_save_slots()
            self.console.print(", ".join(slots) if slots else "No saved games.")
        elif command == "export":
            if not args:
                raise ValueError("export needs a file path")
            target = export_document(args[0], service.save())
            self.console.print(f"Exported to {target}.")
        elif command == "import":
            if not args:
                raise ValueError("import needs a file path")
            render_snapshot(self.console, service.load(import_document(args[0])))
        elif command == "help":
            _render_message_panel(self.console, "Guidance", HELP_LINES, border_style=_BORDER_HELP)
        else:
            self.console.print(f"[red]Unknown command {command!r}. Type 'help'.[/red]")

    def _render_standings(self) -> None:
        table = Table(title="Standings")
        table.add_column("#", justify="right")
        table.add_column("Sect")
        table.add_column("Li", justify="right")
        table.add_column("Location")
        for row in self.game_service.standings():
            name = f"{row.name} (arrived)" if row.reached_goal else row.name
            table.add_row(str(row.rank), name, str(row.progress), row.location_name)
        self.console.print(table)

    def _render_log(self, day: int) -> None:
        grouped = self.game_service.log_by_day()
        days = [day] if day else sorted(grouped)
        for key in days:
            lines = [escape(f"[{entry.category}] {entry.text}") for entry in grouped.get(key, [])]
            _render_message_panel(self.console, f"Day {key}", lines, border_style=_BORDER_LOG)


def run_arbiter_console(game_service: GameService) -> None:
    ArbiterConsole(game_service).run()
