"""Rich terminal output for ranked selections.

Provides formatted, color-coded terminal output using the Rich library.
Theme: Catppuccin Mocha (https://catppuccin.com/palette/)
"""

from __future__ import annotations

from rich.align import Align
from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from .. import __version__
from ..engine.models import Context, PartOfSpeech
from ..engine.ranker import Ranker, Selection

# Catppuccin Mocha palette (subset in use)
MOCHA = {
    "mauve": "#cba6f7",
    "red": "#f38ba8",
    "maroon": "#eba0ac",
    "peach": "#fab387",
    "yellow": "#f9e2af",
    "green": "#a6e3a1",
    "teal": "#94e2d5",
    "sky": "#89dceb",
    "sapphire": "#74c7ec",
    "blue": "#89b4fa",
    "lavender": "#b4befe",
    "text": "#cdd6f4",
    "subtext1": "#bac2de",
    "subtext0": "#a6adc8",
    "overlay1": "#7f849c",
    "overlay0": "#6c7086",
    "surface2": "#585b70",
    "surface1": "#45475a",
    "surface0": "#313244",
    "crust": "#11111b",
}

# Rich theme for markup tags
MOCHA_THEME = Theme({
    "info": MOCHA["sapphire"],
    "warning": MOCHA["peach"],
    "danger": MOCHA["red"],
    "success": MOCHA["green"],
})

# Color for each part of speech
POS_COLORS = {
    PartOfSpeech.NOUN: MOCHA["blue"],
    PartOfSpeech.PREFIX: MOCHA["sky"],
    PartOfSpeech.VERB: MOCHA["green"],
    PartOfSpeech.ADJECTIVE: MOCHA["peach"],
    PartOfSpeech.ADVERB: MOCHA["yellow"],
    PartOfSpeech.ADNOMINAL: MOCHA["teal"],
    PartOfSpeech.CONJUNCTION: MOCHA["sapphire"],
    PartOfSpeech.PARTICLE: MOCHA["overlay1"],
    PartOfSpeech.AUXILIARY_VERB: MOCHA["mauve"],
    PartOfSpeech.EXCLAMATION: MOCHA["red"],
    PartOfSpeech.SYMBOL: MOCHA["overlay0"],
    PartOfSpeech.FILLER: MOCHA["overlay0"],
    PartOfSpeech.OTHER: MOCHA["subtext1"],
}


def _pos_badge(pos: PartOfSpeech) -> Text:
    """Render a part of speech as a colored label."""
    color = POS_COLORS.get(pos, MOCHA["subtext1"])
    return Text(pos.value, style=f"bold {color}")


def _score_badge(scores: list[int]) -> Text:
    """Render a tier score vector as a compact pill: e.g. ``[1 -1]``."""
    if scores and scores[0] > 0:
        color = MOCHA["green"]
    elif any(s < 0 for s in scores):
        color = MOCHA["red"]
    else:
        color = MOCHA["yellow"]

    badge = Text()
    badge.append(f" {' '.join(f'{s:+d}' for s in scores)} ", style=f"bold {MOCHA['crust']} on {color}")
    return badge


def _definitions_text(selection: Selection) -> Text:
    text = Text()
    for i, definition in enumerate(selection.definitions):
        if i:
            text.append("\n")
        text.append(f"{i + 1}. ", style=MOCHA["overlay1"])
        text.append(definition.text, style=MOCHA["text"])
        if definition.flags:
            text.append(f" {' '.join(definition.flags)}", style=MOCHA["maroon"])
    return text


def _examples_text(selection: Selection, limit: int) -> Text:
    text = Text()
    for i, example in enumerate(selection.examples[:limit]):
        if i:
            text.append("\n\n")
        text.append(example.foreign_text, style=MOCHA["text"])
        text.append("\n")
        text.append(example.native_text, style=MOCHA["subtext0"])
    hidden = len(selection.examples) - limit
    if hidden > 0:
        text.append(f"\n(+{hidden} more)", style=MOCHA["overlay0"])
    return text


class TerminalOutput:
    """Rich terminal output formatter.

    Renders one table row per analyzed word with its selected readings,
    definitions, examples and audio links.
    """

    def __init__(
        self,
        console: Console | None = None,
        no_color: bool = False,
        profile: str = "default",
        ranker: Ranker | None = None,
    ):
        """Initialize terminal output.

        Args:
            console: Optional Rich console instance
            no_color: If True, disable colored output
            profile: Active filter profile name
            ranker: Ranker used for score breakdowns
        """
        if console:
            self.console = console
        elif no_color:
            self.console = Console(no_color=True, highlight=False)
        else:
            self.console = Console(theme=MOCHA_THEME)

        self.profile = profile
        self.ranker = ranker or Ranker()

    def print_header(self, source: str | None = None, word_count: int = 0) -> None:
        """Print the banner panel and input summary.

        Args:
            source: Input file name or 'stdin'
            word_count: Number of analyzed words
        """
        self.console.print()
        self.console.print(
            Panel(
                Align.center(
                    Text("GLOSSRANK - Dictionary Definitions", style=f"bold {MOCHA['mauve']}")
                ),
                box=ROUNDED,
                border_style=MOCHA["mauve"],
                padding=(0, 1),
            )
        )

        info = Text()
        info.append("Profile: ", style=MOCHA["subtext0"])
        info.append(f" {self.profile.upper()} ", style=f"bold {MOCHA['lavender']}")
        if source:
            info.append("  ")
            info.append(source, style=MOCHA["text"])
        info.append(" | ", style=MOCHA["surface2"])
        info.append(f"{word_count} words", style=MOCHA["green"])
        self.console.print(info)
        self.console.print()

    def print_results(
        self,
        results: list[tuple[Context, Selection]],
        max_examples: int = 2,
    ) -> None:
        """Print the results table.

        Args:
            results: Pairs of analyzed word and its selection
            max_examples: Examples shown per word
        """
        if not results:
            self.console.print(
                f"[{MOCHA['yellow']}]No words to display[/{MOCHA['yellow']}]"
            )
            return

        table = Table(
            box=ROUNDED,
            border_style=MOCHA["surface1"],
            header_style=f"bold {MOCHA['blue']}",
            show_lines=True,
            expand=True,
        )
        table.add_column("Word", style=f"bold {MOCHA['text']}", no_wrap=True)
        table.add_column("Count", justify="right", style=MOCHA["subtext0"])
        table.add_column("Reading", style=MOCHA["sky"])
        table.add_column("Part of Speech")
        table.add_column("Definition", ratio=3)
        table.add_column("Examples", ratio=2)
        table.add_column("Audio", style=MOCHA["sapphire"], overflow="fold")

        for context, selection in results:
            audio = Text("\n".join(selection.audio)) if selection.audio else Text("none", style=MOCHA["overlay0"])
            table.add_row(
                Text(context.word),
                str(context.count),
                Text(", ".join(sorted(selection.readings))),
                _pos_badge(context.pos),
                _definitions_text(selection),
                _examples_text(selection, max_examples),
                audio,
            )

        self.console.print(table)

    def print_score_breakdown(self, context: Context) -> None:
        """Print every candidate entry of a word with its tier scores.

        Args:
            context: Analyzed word to explain
        """
        breakdown = self.ranker.get_score_breakdown(context)
        if not breakdown:
            return

        table = Table(box=None, padding=(0, 2), show_edge=False)
        table.add_column("Score", no_wrap=True)
        table.add_column("Source", style=MOCHA["subtext0"], no_wrap=True)
        table.add_column("Forms", style=MOCHA["text"])
        table.add_column("Matched", style=MOCHA["overlay1"])

        for row in breakdown:
            matched = " | ".join(", ".join(labels) or "-" for labels in row["matched"])
            table.add_row(
                _score_badge(row["scores"]),
                Text(row["source"]),
                Text(", ".join(row["forms"])),
                Text(matched),
            )

        self.console.print(
            Panel(
                table,
                title=Text(f"{context.word} ({context.reading})", style=MOCHA["overlay0"]),
                title_align="left",
                box=ROUNDED,
                border_style=MOCHA["surface1"],
                padding=(0, 1),
            )
        )

    def print_summary(self, results: list[tuple[Context, Selection]]) -> None:
        """Print coverage counts and the footer.

        Args:
            results: Pairs of analyzed word and its selection
        """
        total = len(results)
        with_defs = sum(1 for _, s in results if s.definitions)
        with_audio = sum(1 for _, s in results if s.audio)
        without_entries = sum(1 for c, _ in results if not c.dict_info)

        summary = Text()
        summary.append(f"{with_defs}/{total} with definitions", style=MOCHA["green"])
        summary.append(" | ", style=MOCHA["surface2"])
        summary.append(f"{with_audio}/{total} with audio", style=MOCHA["sapphire"])
        summary.append(" | ", style=MOCHA["surface2"])
        summary.append(f"{without_entries} without dictionary entries", style=MOCHA["peach"])

        self.console.print()
        self.console.print(summary)
        self.console.print(Rule(style=MOCHA["surface2"]))
        footer = f"glossrank v{__version__} | Profile: {self.profile} | {total} words"
        self.console.print(Align.center(Text(footer, style=MOCHA["overlay1"])))
        self.console.print()
