"""Display module for volume matching results with rich terminal output."""

from typing import Any, Dict, List, Optional, Sequence
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from ..models import Consumption, Entity, Generation, MatchingResult, StrategyResult


class MatchingDisplay:
    """Handles all display output for the volume matching engine."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize display with Rich console."""
        self.console = console or Console()

    def show_header(self) -> None:
        """Display the matching engine header."""
        header_text = Text("⚡ PROPORTIONAL VOLUME MATCHING", style="bold blue")

        panel = Panel(
            "Energy consumption / generation matching engine\n\n"
            "🏠 Site first, then region, country and other countries\n"
            "📊 Proportional split with whole-unit volumes\n"
            "🔄 Every strategy repeats until it stops matching",
            title=header_text,
            border_style="blue",
            padding=(1, 2),
        )

        self.console.print()
        self.console.print(panel)
        self.console.print()

    def show_loading_summary(self, consumption_count: int, generation_count: int) -> None:
        """Display summary of loaded records.

        Args:
            consumption_count: Number of consumptions loaded
            generation_count: Number of generations loaded
        """
        summary = Panel(
            f"📁 Consumptions: {consumption_count:,}\n"
            f"📁 Generations: {generation_count:,}",
            title="[bold green]Data Loaded Successfully[/bold green]",
            border_style="green",
        )

        self.console.print(summary)
        self.console.print()

    def show_match_results(self, result: MatchingResult, statistics: Dict[str, Any]) -> None:
        """Display summed matches and overall statistics.

        Args:
            result: Result of the matching run
            statistics: Volume totals (see MatchingPool.get_match_statistics)
        """
        stats_text = (
            f"✅ Matched Pairs: {len(result.matches)}\n"
            f"⚡ Matched Volume: {statistics.get('matched_volume', 0):,}\n"
            f"📊 Consumption Match Rate: {statistics.get('consumption_match_rate', 0):.1f}%\n"
            f"📈 Generation Match Rate: {statistics.get('generation_match_rate', 0):.1f}%\n"
            f"🎯 Leftover Consumptions: {len(result.leftover_consumptions)}\n"
            f"🎯 Leftover Generations: {len(result.leftover_generations)}"
        )

        self.console.print(
            Panel(stats_text, title="[bold yellow]Matching Results[/bold yellow]", border_style="yellow")
        )
        self.console.print()

        if result.matches:
            self._show_matches_table(result)

    def _show_matches_table(self, result: MatchingResult) -> None:
        self.console.print("[bold cyan]Matches:[/bold cyan]")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Consumption", width=16)
        table.add_column("Generation", width=16)
        table.add_column("Volume", justify="right", width=12)

        for match in result.matches[:20]:  # Show first 20 matches
            table.add_row(match.consumption_id, match.generation_id, f"{match.volume:,}")

        self.console.print(table)

        if len(result.matches) > 20:
            self.console.print(f"[dim]... and {len(result.matches) - 20} more matches[/dim]")

        self.console.print()

    def show_strategy_tables(
        self,
        result: MatchingResult,
        consumptions: Sequence[Consumption],
        generations: Sequence[Generation],
    ) -> None:
        """Display a generation x consumption grid for every strategy.

        Headers show the volume each entity has left after the strategy, cells
        show the volume matched so far. Changes made by the strategy itself
        are shown in brackets.

        Args:
            result: Result of the matching run
            consumptions: Validated input consumptions
            generations: Validated input generations
        """
        remaining_consumption = {c.id: c.volume for c in consumptions}
        remaining_generation = {g.id: g.volume for g in generations}
        cumulative: Dict[tuple[str, str], int] = {}

        for strategy_result in result.strategy_results:
            delta = {m.pair: m.volume for m in strategy_result.matches}
            consumption_delta, generation_delta = self._entity_deltas(strategy_result)

            for entity_id, taken in consumption_delta.items():
                remaining_consumption[entity_id] -= taken
            for entity_id, taken in generation_delta.items():
                remaining_generation[entity_id] -= taken

            table = Table(
                title=f"{strategy_result.strategy_name} ({strategy_result.rounds} rounds)",
                show_header=True,
                header_style="bold magenta",
            )
            table.add_column("")
            for c in consumptions:
                header = self._format_change(
                    f"{c.id} ({remaining_consumption[c.id]}", -consumption_delta.get(c.id, 0)
                )
                table.add_column(header + ")", justify="right")

            for g in generations:
                label = self._format_change(
                    f"{g.id} ({remaining_generation[g.id]}", -generation_delta.get(g.id, 0)
                )
                row = [label + ")"]
                for c in consumptions:
                    pair = (c.id, g.id)
                    cumulative[pair] = cumulative.get(pair, 0) + delta.get(pair, 0)
                    row.append(self._format_change(str(cumulative[pair]), delta.get(pair, 0)))
                table.add_row(*row)

            self.console.print(table)
            self.console.print()

    @staticmethod
    def _entity_deltas(
        strategy_result: StrategyResult,
    ) -> tuple[Dict[str, int], Dict[str, int]]:
        consumed: Dict[str, int] = {}
        generated: Dict[str, int] = {}
        for m in strategy_result.matches:
            consumed[m.consumption_id] = consumed.get(m.consumption_id, 0) + m.volume
            generated[m.generation_id] = generated.get(m.generation_id, 0) + m.volume
        return consumed, generated

    @staticmethod
    def _format_change(value: str, change: int) -> str:
        if change == 0:
            return value
        color = "green" if change > 0 else "red"
        sign = "+" if change > 0 else "-"
        return f"{value} [{color}]({sign}{abs(change)})[/{color}]"

    def show_leftovers(
        self, consumptions: List[Consumption], generations: List[Generation]
    ) -> None:
        """Display leftover consumptions and generations.

        Args:
            consumptions: Leftover consumptions
            generations: Leftover generations
        """
        if consumptions:
            self._show_leftover_table("Leftover Consumptions", consumptions)

        if generations:
            self._show_leftover_table("Leftover Generations", generations)

    def _show_leftover_table(self, title: str, entities: Sequence[Entity]) -> None:
        self.console.print(f"[bold red]{title} ({len(entities)}):[/bold red]")

        table = Table(show_header=True, header_style="bold red")
        table.add_column("Id", width=16)
        table.add_column("Volume", justify="right", width=12)
        table.add_column("Site", width=10)
        table.add_column("Region", width=10)
        table.add_column("Country", width=10)

        # Show first 10 leftovers
        for entity in entities[:10]:
            table.add_row(
                entity.id,
                f"{entity.volume:,}",
                entity.site_id,
                entity.region_id,
                entity.country_id,
            )

        self.console.print(table)

        if len(entities) > 10:
            self.console.print(f"[dim]... and {len(entities) - 10} more[/dim]")

        self.console.print()

    def show_error(self, message: str) -> None:
        """Display an error message.

        Args:
            message: Error message to display
        """
        error_panel = Panel(
            f"❌ {message}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
        self.console.print(error_panel)

    def show_strategy_info(self, strategy_info: Dict) -> None:
        """Display information about a path strategy.

        Args:
            strategy_info: Dictionary with strategy metadata
        """
        info_text = (
            f"📋 {strategy_info['name']}\n"
            f"📝 {strategy_info['description']}"
        )
        if strategy_info.get("matched_fields"):
            info_text += f"\n🔍 Fields: {', '.join(strategy_info['matched_fields'])}"
        if "predicate" in strategy_info:
            info_text += f"\n💡 Predicate: {strategy_info['predicate']}"

        self.console.print(
            Panel(info_text, title=f"[bold blue]{strategy_info['kind']}[/bold blue]", border_style="blue")
        )
