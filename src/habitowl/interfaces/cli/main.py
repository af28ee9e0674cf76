"""CLI interface for ad and onboarding operations.

Provides commands for:
- Checking ad service status
- Viewing impression statistics
- Toggling premium status
- Simulating an ad session
- Validating consent input
- Patching native project files
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ...config import AdUnitRegistry, Settings, get_settings
from ...models.core import Platform
from ...sdk import AdSdk, Available, SimulatedAdsSdk, load_ads_sdk
from ...services import AdService
from ...storage import get_storage_backend

app = typer.Typer(
    name="habitowl",
    help="HabitOwl CLI - Inspect ad serving, consent and native configuration",
)
console = Console()

SIMULATED_LOAD_WAIT_SECONDS = 0.05


def configure_logging(settings: Settings) -> None:
    """Route log records through rich at the configured level."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if settings.ads_debug:
        logging.getLogger("habitowl.services").setLevel(logging.DEBUG)
        logging.getLogger("habitowl.components").setLevel(logging.DEBUG)


@app.callback()
def main() -> None:
    configure_logging(get_settings())


@asynccontextmanager
async def open_ad_service(
    settings: Settings,
    sdk: Optional[AdSdk] = None,
    platform: Optional[Platform] = None,
) -> AsyncIterator[AdService]:
    """Connect storage and build an initialized ad service."""
    storage = get_storage_backend(
        storage_type=settings.storage_type,
        database_url=settings.database_url,
        redis_url=settings.redis_url,
    )
    await storage.connect()
    service = AdService(
        storage,
        sdk or load_ads_sdk(settings.ads_sdk),
        AdUnitRegistry(dev_mode=settings.dev_mode),
        platform=platform or settings.app_platform,
    )
    try:
        await service.initialize()
        yield service
    finally:
        await service.aclose()
        await storage.disconnect()


@app.command()
def status():
    """Show ad service status."""
    settings = get_settings()

    async def run():
        async with open_ad_service(settings) as service:
            return service.get_status()

    result = asyncio.run(run())

    table = Table(title="Ad Service Status")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in result.model_dump(mode="json").items():
        if field == "ad_unit_ids":
            continue
        table.add_row(field, str(value))
    console.print(table)

    units = Table(title="Ad Units")
    units.add_column("Format", style="yellow")
    units.add_column("Ad Unit ID")
    for ad_format, ad_unit_id in result.ad_unit_ids.items():
        units.add_row(ad_format, ad_unit_id or "-")
    console.print(units)


@app.command()
def stats():
    """Show persisted ad impression statistics."""
    settings = get_settings()

    async def run():
        async with open_ad_service(settings, sdk=load_ads_sdk("none")) as service:
            return await service.get_ad_impression_stats()

    result = asyncio.run(run())

    console.print(Panel(f"Total impressions: [green]{result.total}[/green]", title="Impressions"))
    for impression_type, count in sorted(result.by_type.items()):
        console.print(f"  {impression_type}: {count}")

    if result.recent:
        table = Table(title="Most Recent")
        table.add_column("Time")
        table.add_column("Type", style="yellow")
        table.add_column("Context")
        table.add_column("Platform")
        for record in result.recent:
            when = datetime.fromtimestamp(record.timestamp / 1000).isoformat(timespec="seconds")
            table.add_row(when, record.type.value, record.context, record.platform.value)
        console.print(table)


@app.command()
def premium(
    state: str = typer.Argument(..., help="on or off"),
):
    """Set the persisted premium status."""
    if state.lower() not in ("on", "off"):
        console.print(f"[red]Expected 'on' or 'off', got: {state}[/red]")
        raise typer.Exit(1)

    settings = get_settings()
    is_premium = state.lower() == "on"

    async def run():
        async with open_ad_service(settings, sdk=load_ads_sdk("none")) as service:
            await service.set_premium_status(is_premium)

    asyncio.run(run())
    label = "[green]PREMIUM[/green]" if is_premium else "[yellow]FREE[/yellow]"
    console.print(f"Premium status set: {label}")


@app.command()
def simulate(
    interstitials: int = typer.Option(3, "--interstitials", "-n", help="Interstitial attempts"),
    rewarded: bool = typer.Option(False, "--rewarded", "-r", help="Also request a rewarded ad"),
    action: Optional[str] = typer.Option(
        None, "--action", "-a", help="Ask the placement heuristic about this action first"
    ),
    fill: bool = typer.Option(True, "--fill/--no-fill", help="Whether the network fills requests"),
    platform: Platform = typer.Option(Platform.ANDROID, "--platform", "-p"),
):
    """Run an ad session against the simulated ad network."""
    settings = get_settings()
    sdk = SimulatedAdsSdk(fill=fill)

    async def run():
        results = []
        async with open_ad_service(settings, Available(sdk=sdk), platform) as service:
            await asyncio.sleep(SIMULATED_LOAD_WAIT_SECONDS)

            if action:
                advised = service.should_show_interstitial_after_action(action)
                console.print(f"Placement heuristic for [cyan]{action}[/cyan]: {advised}")

            for attempt in range(1, interstitials + 1):
                shown = await service.show_interstitial(context=f"simulation-{attempt}")
                results.append(("interstitial", attempt, shown))
                await asyncio.sleep(SIMULATED_LOAD_WAIT_SECONDS)

            if rewarded:
                earned = await service.show_rewarded_ad(
                    lambda reward: console.print(
                        f"[green]Reward: {reward.amount} x {reward.type}[/green]"
                    ),
                    context="simulation",
                )
                results.append(("rewarded", 1, earned))

            return results, service.get_status()

    results, final_status = asyncio.run(run())

    table = Table(title="Simulated Session")
    table.add_column("Format", style="yellow")
    table.add_column("Attempt")
    table.add_column("Shown")
    for ad_format, attempt, shown in results:
        table.add_row(ad_format, str(attempt), "[green]yes[/green]" if shown else "[red]no[/red]")
    console.print(table)
    console.print(
        f"Session interstitials: {final_status.session_interstitial_count}, "
        f"ads enabled: {final_status.should_show_ads}"
    )


@app.command()
def consent(
    birth_year: str = typer.Option(..., "--birth-year", "-y", help="Four digit birth year"),
    terms: bool = typer.Option(False, "--terms", help="Accept the Terms of Service"),
    privacy: bool = typer.Option(False, "--privacy", help="Accept the Privacy Policy"),
    data_processing: bool = typer.Option(False, "--data", help="Accept data processing"),
    marketing: bool = typer.Option(False, "--marketing", help="Opt in to marketing"),
    email: Optional[str] = typer.Option(None, "--email", help="User email to hand forward"),
):
    """Validate consent input the way the onboarding screen does."""
    from ...onboarding import ConsentRouteParams, ConsentScreen

    class PrintingNavigator:
        def navigate(self, route: str, params: dict) -> None:
            console.print(Panel(json.dumps(params, indent=2), title=f"Navigate: {route}"))

        def go_back(self) -> None:
            console.print("[yellow]Exited onboarding[/yellow]")

    screen = ConsentScreen(PrintingNavigator(), ConsentRouteParams(user_email=email))
    screen.set_birth_year(birth_year)
    for key, accepted in (
        ("terms_of_service", terms),
        ("privacy_policy", privacy),
        ("data_processing", data_processing),
        ("marketing", marketing),
    ):
        if accepted:
            screen.toggle_consent(key)

    dialog = screen.handle_continue()
    if dialog is None:
        return

    console.print(Panel(dialog.message, title=f"[red]{dialog.title}[/red]"))
    for action in dialog.actions:
        if action.on_press is not None:
            action.on_press()
    raise typer.Exit(1)


@app.command("patch-native")
def patch_native(
    project_root: Path = typer.Argument(..., help="Root of the Expo project (contains android/ and ios/)"),
):
    """Apply the ads mediation configuration to native project files."""
    from ...native import apply_native_config

    if not project_root.is_dir():
        console.print(f"[red]Not a directory: {project_root}[/red]")
        raise typer.Exit(1)

    report = apply_native_config(project_root)

    table = Table(title="Native Configuration")
    table.add_column("File")
    table.add_column("Result")
    for path in report.changed:
        table.add_row(path, "[green]patched[/green]")
    for path in report.unchanged:
        table.add_row(path, "already configured")
    for path in report.missing:
        table.add_row(path, "[yellow]missing[/yellow]")
    console.print(table)


if __name__ == "__main__":
    app()
