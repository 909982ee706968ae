"""CLI entry point for listing-studio."""

import asyncio
import logging
import mimetypes
import typer
from pathlib import Path
from typing import Optional

from . import __version__
from .config import config
from .errors import AutomationInterrupted, GatewayError
from .models import AutomationStatus, Project

app = typer.Typer(
    name="listing-studio",
    help="AI-powered product listings and ad storyboards",
    no_args_is_help=True
)

STATUS_LABELS = {
    AutomationStatus.IDLE: "Ready",
    AutomationStatus.ANALYZING: "Analyzing market...",
    AutomationStatus.DRAFTING: "Drafting copy...",
    AutomationStatus.BRAINSTORMING: "Ideating concepts...",
    AutomationStatus.STORYBOARDING: "Scripting video...",
    AutomationStatus.RENDERING: "Rendering assets...",
    AutomationStatus.COMPLETE: "Studio ready",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"listing-studio version {__version__}")
        raise typer.Exit()


def _create_gateway():
    """Validate credentials and build a gateway, exiting on configuration errors."""
    from .gateway import Gateway

    try:
        config.validate_required()
        return Gateway()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)


def _read_image(path: Path) -> tuple[bytes, str]:
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        typer.echo(f"❌ Not an image file: {path}")
        raise typer.Exit(1)
    return path.read_bytes(), mime_type


def _preview(text: str, width: int = 70) -> str:
    return text[:width] + "..." if len(text) > width else text


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Listing Studio - Create product listings and ad storyboards using AI."""
    pass


@app.command()
def analyze(
    image: Path = typer.Argument(
        ...,
        help="Product photo to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Describe a product photo: type, materials, features, colors, audience."""
    setup_logging(verbose)
    image_bytes, mime_type = _read_image(image)
    gateway = _create_gateway()

    typer.echo(f"🔍 Analyzing {image.name}")
    try:
        analysis = asyncio.run(gateway.analyze_image(image_bytes, mime_type))
    except GatewayError as e:
        typer.echo(f"❌ Analysis failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"\n{analysis}")


@app.command()
def listing(
    product: str = typer.Argument(
        ...,
        help="Product name or title"
    ),
    tone: str = typer.Option(
        "Persuasive & Professional",
        "--tone",
        "-t",
        help="Tone of voice (e.g., 'Fun & Energetic', 'Luxury & Minimalist')"
    ),
    context: str = typer.Option(
        "",
        "--context",
        "-c",
        help="Additional context for the copywriter"
    ),
    image: Optional[Path] = typer.Option(
        None,
        "--image",
        "-i",
        help="Product photo; analyzed and used to ground the listing",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a marketplace listing and print it in copy-paste format."""
    setup_logging(verbose)
    gateway = _create_gateway()

    image_bytes: Optional[bytes] = None
    mime_type: Optional[str] = None
    if image:
        image_bytes, mime_type = _read_image(image)

    async def _generate():
        listing_context = context
        if image_bytes is not None:
            typer.echo(f"🔍 Analyzing {image.name}...")
            try:
                analysis = await gateway.analyze_image(image_bytes, mime_type)
                listing_context = (
                    f"{context}\n\nVisual Analysis: {analysis}" if context else f"Visual Analysis: {analysis}"
                )
            except GatewayError as e:
                typer.echo(f"⚠️  Image analysis failed, continuing without it: {e}")
        typer.echo(f"✍️  Writing listing for: {product}")
        return await gateway.generate_listing(product, tone, listing_context, image_bytes, mime_type)

    try:
        result = asyncio.run(_generate())
    except GatewayError as e:
        typer.echo(f"❌ Listing generation failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"\n{result.to_clipboard_text()}")


@app.command()
def concepts(
    product: str = typer.Argument(
        ...,
        help="Product to promote"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Brainstorm three video ad concepts."""
    from .automation import select_concept

    setup_logging(verbose)
    gateway = _create_gateway()

    typer.echo(f"💡 Brainstorming concepts for: {product}")
    results = asyncio.run(gateway.generate_marketing_concepts(product))
    chosen = select_concept(results)

    for i, concept in enumerate(results, 1):
        marker = "⭐" if concept == chosen else "  "
        typer.echo(f"   {marker} {i}. {concept}")


@app.command()
def storyboard(
    product: str = typer.Argument(
        ...,
        help="Product to promote"
    ),
    concept: str = typer.Option(
        ...,
        "--concept",
        "-c",
        help="Ad concept to storyboard"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Script a storyboard (prompts only, no rendering)."""
    setup_logging(verbose)
    gateway = _create_gateway()

    typer.echo(f"🎬 Scripting storyboard for: {product}")
    try:
        scenes = asyncio.run(gateway.generate_storyboard(product, concept))
    except GatewayError as e:
        typer.echo(f"❌ Storyboard generation failed: {e}")
        raise typer.Exit(1)

    for scene in scenes:
        typer.echo(f"\n🎞️  Scene {scene.scene_number}")
        typer.echo(f"   Start:  {scene.start_frame_prompt}")
        typer.echo(f"   Motion: {scene.video_motion_prompt}")
        typer.echo(f"   End:    {scene.end_frame_prompt}")


@app.command()
def automate(
    product: str = typer.Argument(
        ...,
        help="Product to promote"
    ),
    concept: Optional[str] = typer.Option(
        None,
        "--concept",
        "-c",
        help="Use this concept instead of brainstorming"
    ),
    output: Path = typer.Option(
        Path("./studio"),
        "--output",
        "-o",
        help="Output directory for project.yaml and rendered frames"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Run the full pipeline: listing, concepts, storyboard and frame rendering."""
    from .automation import AutomationOrchestrator

    setup_logging(verbose)
    gateway = _create_gateway()

    last_status: list[AutomationStatus] = []

    def on_update(snapshot: Project) -> None:
        if not last_status or last_status[-1] != snapshot.status:
            last_status.append(snapshot.status)
            typer.echo(f"   [{snapshot.progress:3d}%] {STATUS_LABELS[snapshot.status]}")

    orchestrator = AutomationOrchestrator(gateway, product_name=product, on_update=on_update)

    typer.echo(f"🚀 Automating: {product}")
    try:
        project = asyncio.run(orchestrator.run(concept=concept))
    except AutomationInterrupted as e:
        typer.echo(f"❌ Automation interrupted during {e.stage}: {e.__cause__}")
        raise typer.Exit(1)

    output.mkdir(parents=True, exist_ok=True)
    project_path = output / "project.yaml"
    project.to_yaml(project_path)

    for scene in project.storyboard:
        for label, image in (("start", scene.start_image), ("end", scene.end_image)):
            if image is not None:
                (output / f"scene_{scene.scene_number}_{label}.{image.extension}").write_bytes(image.to_bytes())

    rendered = sum(1 for scene in project.storyboard if scene.is_rendered)
    typer.echo(f"\n📋 Summary:")
    if project.listing:
        typer.echo(f"   Title: {_preview(project.listing.title)}")
        typer.echo(f"   Price: {project.listing.suggested_price}")
    typer.echo(f"   Concept: {_preview(project.selected_concept or '')}")
    typer.echo(f"   Scenes rendered: {rendered}/{len(project.storyboard)}")
    typer.echo(f"\n✅ Project saved: {project_path}")

    if rendered < len(project.storyboard):
        typer.echo(f"⚠️  {len(project.storyboard) - rendered} scene(s) failed to render")


if __name__ == "__main__":
    app()
