"""Main CLI application using Typer."""
import asyncio
import contextlib
import os
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..activity import ActivityLog
from ..assistant import VIDEO_ERROR_MESSAGE, Assistant, ResearchMode
from ..audio import write_wav
from ..capabilities import AspectRatio, Attachment, CapabilityError, GeoLocation, ResearchResult
from .providers import get_storage, open_activity_log, require_client

load_dotenv()

app = typer.Typer(
    name="aura",
    help="Personal assistant for chat, grounded research, speech and video generation",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def _print_debug(level: str, component: str, message: str) -> None:
    """Surface warnings and errors from library components."""
    if level == "warning":
        console.print(f"[yellow]{component}: {message}[/yellow]")
    elif level == "error":
        console.print(f"[red]{component}: {message}[/red]")


@contextlib.asynccontextmanager
async def _assistant() -> AsyncIterator[Assistant]:
    """Open the activity log and capability client for one command."""
    client = require_client(console)
    log = await open_activity_log(_print_debug)
    try:
        yield Assistant(client, log)
    finally:
        await log.storage.disconnect()
        await client.close()


def _load_image(path: Path) -> Attachment:
    try:
        return Attachment.from_path(path)
    except OSError as e:
        raise typer.BadParameter(f"Cannot read image {path}: {e}") from e


def _format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _print_research(result: ResearchResult) -> None:
    console.print(Panel(result.text or "[dim]No answer text[/dim]", title="Answer", border_style="cyan"))
    if not result.references:
        console.print("[dim]No grounding sources returned[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=3)
    table.add_column("Kind", style="yellow", width=6)
    table.add_column("Title")
    table.add_column("URI", style="blue")
    for i, ref in enumerate(result.references, 1):
        table.add_row(str(i), ref.kind, ref.title or "-", ref.uri)
    console.print(table)


@app.command()
def chat(
    message: str = typer.Argument("", help="Message to send"),
    thinking: bool = typer.Option(
        False,
        "--thinking",
        "-t",
        help="Enable thinking mode (extended reasoning budget)"
    ),
    image: Optional[Path] = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        help="Attach an image to analyze"
    )
):
    """Send one message to Aura and print the reply."""
    if not message.strip() and image is None:
        raise typer.BadParameter("Provide a message or an --image")

    attachment = _load_image(image) if image else None

    async def _chat() -> bool:
        async with _assistant() as assistant:
            session = assistant.new_chat_session()
            reply = await session.send(message, image=attachment, use_thinking=thinking)
            if session.last_error is not None:
                console.print(f"[red]Error: {session.last_error}[/red]")
                console.print(f"[dim]{reply.content}[/dim]")
                return False
            console.print(Panel(reply.content, title="Aura", border_style="magenta"))
            return True

    if not asyncio.run(_chat()):
        raise typer.Exit(code=1)


@app.command()
def research(
    query: str = typer.Argument(..., help="Research query"),
    mode: ResearchMode = typer.Option(
        ResearchMode.SEARCH,
        "--mode",
        "-m",
        help="Grounding source: search or places"
    ),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude to bias place results"),
    lng: Optional[float] = typer.Option(None, "--lng", help="Longitude to bias place results"),
):
    """Answer a query grounded on web search or map data."""
    if (lat is None) != (lng is None):
        raise typer.BadParameter("--lat and --lng must be given together")

    try:
        location = GeoLocation(latitude=lat, longitude=lng) if lat is not None else None
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    async def _research() -> bool:
        async with _assistant() as assistant:
            console.print(f"[dim]Researching with mode: {mode.value}[/dim]\n")
            try:
                result = await assistant.research(query, mode, location)
            except (CapabilityError, ValueError) as e:
                console.print(f"[red]Error: {e}[/red]")
                return False
            _print_research(result)
            return True

    if not asyncio.run(_research()):
        raise typer.Exit(code=1)


@app.command()
def speak(
    text: str = typer.Argument(..., help="Text to speak"),
    output: Path = typer.Option(
        Path("aura-speech.wav"),
        "--output",
        "-o",
        dir_okay=False,
        help="WAV file to write"
    )
):
    """Synthesize speech and save it as a WAV file."""
    async def _speak() -> bool:
        async with _assistant() as assistant:
            try:
                audio = await assistant.speak(text)
            except (CapabilityError, ValueError) as e:
                console.print(f"[red]Error: {e}[/red]")
                return False
            if not audio:
                console.print("[yellow]The service returned no audio[/yellow]")
                return False
            path = write_wav(output, audio)
            console.print(f"[green]Saved {len(audio):,} bytes of audio to {path}[/green]")
            return True

    if not asyncio.run(_speak()):
        raise typer.Exit(code=1)


@app.command()
def describe(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image to analyze"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Question about the image"),
):
    """Ask a question about an image."""
    attachment = _load_image(image)

    async def _describe() -> bool:
        async with _assistant() as assistant:
            try:
                answer = await assistant.describe_image(attachment, prompt)
            except CapabilityError as e:
                console.print(f"[red]Error: {e}[/red]")
                return False
            console.print(Panel(answer or "[dim]No answer text[/dim]", title="Aura", border_style="magenta"))
            return True

    if not asyncio.run(_describe()):
        raise typer.Exit(code=1)


@app.command()
def ask(query: str = typer.Argument(..., help="Question for the fast model")):
    """Get a quick answer from the low-latency model."""
    async def _ask() -> bool:
        async with _assistant() as assistant:
            try:
                answer = await assistant.ask(query)
            except (CapabilityError, ValueError) as e:
                console.print(f"[red]Error: {e}[/red]")
                return False
            console.print(answer)
            return True

    if not asyncio.run(_ask()):
        raise typer.Exit(code=1)


@app.command()
def animate(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source image"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Motion description"),
    aspect: AspectRatio = typer.Option(
        AspectRatio.LANDSCAPE,
        "--aspect",
        "-a",
        help="Video aspect ratio"
    ),
):
    """Animate an image into a short video (may take several minutes)."""
    attachment = _load_image(image)

    async def _animate() -> bool:
        async with _assistant() as assistant:
            try:
                with console.status("[cyan]Generating video, polling for completion...[/cyan]"):
                    video = await assistant.animate(attachment, prompt, aspect)
            except CapabilityError as e:
                console.print(f"[red]Error: {str(e) or VIDEO_ERROR_MESSAGE}[/red]")
                return False
            console.print(f"[green]Video saved to {video.path}[/green]")
            console.print(f"[dim]{video.uri}[/dim]")
            return True

    if not asyncio.run(_animate()):
        raise typer.Exit(code=1)


@app.command()
def history(
    limit: int = typer.Option(
        20,
        "--limit",
        "-l",
        min=1,
        help="Number of recent activities to show"
    )
):
    """Show recorded activities and per-type counts."""
    async def _history() -> None:
        log = await open_activity_log(_print_debug)
        try:
            _print_history(log, limit)
        finally:
            await log.storage.disconnect()

    asyncio.run(_history())


def _print_history(log: ActivityLog, limit: int) -> None:
    if len(log) == 0:
        console.print("[dim]No recent context captured.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("When", style="dim", width=19)
    table.add_column("Type", style="yellow", width=9)
    table.add_column("Description")
    for activity in log.recent(limit):
        table.add_row(_format_timestamp(activity.timestamp), activity.type.value, activity.description)
    console.print(table)

    counts = Table(show_header=False, box=None)
    counts.add_column("Type", style="bold cyan", width=10)
    counts.add_column("Count")
    for activity_type, count in log.count_by_type().items():
        counts.add_row(activity_type.value.capitalize(), str(count))
    console.print(counts)
    console.print(f"[dim]{len(log)} activities in total[/dim]")


@app.command("clear-history")
def clear_history(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    )
):
    """Delete every recorded activity."""
    if not yes:
        console.print("[yellow]WARNING: This will delete all recorded activities![/yellow]")
        if not typer.confirm("Are you sure you want to continue?"):
            console.print("[dim]Aborted.[/dim]")
            return

    async def _clear() -> int:
        log = await open_activity_log(_print_debug)
        try:
            count = len(log)
            await log.clear()
            return count
        finally:
            await log.storage.disconnect()

    deleted = asyncio.run(_clear())
    console.print(f"[green]Success! Deleted {deleted} activities.[/green]")


@app.command()
def health():
    """Check configuration and storage health."""
    async def _health() -> bool:
        all_healthy = True

        if os.getenv("API_KEY"):
            console.print("[green]+[/green] API key: SET")
        else:
            console.print("[red]x[/red] API key: NOT SET")
            all_healthy = False

        storage = get_storage()
        try:
            await storage.connect()
            await storage.get_item("aura_activities")
            console.print(f"[green]+[/green] Storage ({storage.backend_type}): OK")
        except Exception as e:
            console.print(f"[red]x[/red] Storage ({storage.backend_type}): FAILED ({e})")
            all_healthy = False
        finally:
            await storage.disconnect()

        return all_healthy

    if not asyncio.run(_health()):
        raise typer.Exit(code=1)


@app.command()
def tui(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-L",
        help="Show the log panel at this level (debug, info, warning, error)"
    )
):
    """Launch the interactive terminal UI."""
    from ..ui import run_textual_tui

    client = require_client(console)

    async def _tui() -> None:
        log = await open_activity_log()
        try:
            await run_textual_tui(Assistant(client, log), log_level=log_level)
        finally:
            await log.storage.disconnect()
            await client.close()

    asyncio.run(_tui())


if __name__ == "__main__":
    app()
