"""
Vinylogue CLI Module
Command-line interface for generating album cards and browsing the catalog.
"""

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import PROJECT_NAME, PROJECT_VERSION, PROJECT_DESCRIPTION
from ..core.exceptions import ConfigurationError, VinylogueError
from ..core.validation import validate_and_raise
from ..models.records import ArtistRecord, SearchResult
from ..services.card_service import CardService

# Exit codes
EXIT_OK = 0
EXIT_SERVER_ERROR = 1
EXIT_CLIENT_ERROR = 2


def default_output_path(artist: str, album: str) -> Path:
    """'Radiohead', 'OK Computer' -> radiohead-ok-computer.png"""
    slug = re.sub(r"[^\w]+", "-", f"{artist} {album}".lower()).strip("-")
    return Path(f"{slug or 'album-card'}.png")


class VinylogueCLI:
    """Main CLI class for Vinylogue."""

    def __init__(self, service: Optional[CardService] = None, console: Optional[Console] = None):
        self._service = service
        self.console = console or Console(stderr=True)

    @property
    def service(self) -> CardService:
        # Built lazily so --help works without credentials
        if self._service is None:
            self._service = CardService()
        return self._service

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog=PROJECT_NAME.lower(),
            description=f"{PROJECT_NAME} - {PROJECT_DESCRIPTION} v{PROJECT_VERSION}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s card --artist "Radiohead" --album "OK Computer"
  %(prog)s card --artist "Radiohead" --album "OK Computer" --output - > card.png
  %(prog)s artist --artist "Portishead"
  %(prog)s search "dummy"
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'{PROJECT_NAME} {PROJECT_VERSION}'
        )

        subparsers = parser.add_subparsers(
            dest='mode',
            help='Available modes',
            required=True
        )

        card_parser = subparsers.add_parser('card', help='Render an album card as PNG')
        card_parser.add_argument('--artist', '-a', required=True, help='Artist name')
        card_parser.add_argument('--album', '-l', required=True, help='Album title')
        card_parser.add_argument(
            '--output', '-o',
            help="Output file (default: <artist>-<album>.png, '-' for stdout)"
        )

        artist_parser = subparsers.add_parser('artist', help='Show an artist with top tracks, albums and related artists')
        artist_parser.add_argument('--artist', '-a', required=True, help='Artist name')

        search_parser = subparsers.add_parser('search', help='Search albums and artists')
        search_parser.add_argument('query', help='Free-text query')
        search_parser.add_argument('--limit', '-n', type=int, default=None, help='Maximum results per type')

        return parser

    def run(self, args: List[str] = None) -> int:
        """Run the CLI with given arguments and return the exit code."""
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        try:
            validate_and_raise()
            if parsed_args.mode == 'card':
                return self._run_card(parsed_args.artist, parsed_args.album, parsed_args.output)
            elif parsed_args.mode == 'artist':
                self.display_artist(self.service.describe_artist(parsed_args.artist))
            elif parsed_args.mode == 'search':
                self.display_search_results(self.service.search(parsed_args.query, parsed_args.limit))
            return EXIT_OK
        except ConfigurationError as e:
            self.console.print(f"[red]✗[/red] {escape(str(e))}")
            return EXIT_SERVER_ERROR
        except VinylogueError as e:
            self.console.print(f"[red]✗[/red] {escape(str(e))}")
            return EXIT_CLIENT_ERROR if e.is_client_error else EXIT_SERVER_ERROR

    def _run_card(self, artist: str, album: str, output: Optional[str]) -> int:
        image = self.service.generate_album_card(artist, album)
        if output == '-':
            sys.stdout.buffer.write(image)
            sys.stdout.buffer.flush()
            return EXIT_OK

        path = Path(output) if output else default_output_path(artist, album)
        path.write_bytes(image)
        self.console.print(f"[green]✓[/green] Saved card to [bold]{path}[/bold]")
        return EXIT_OK

    def display_artist(self, artist: ArtistRecord):
        """Print an artist profile."""
        self.console.print(f"[bold]{artist.name}[/bold]  [dim]{artist.canonical_url}[/dim]")

        if artist.top_tracks:
            table = Table(title="Top Tracks")
            table.add_column("#", justify="right", style="dim")
            table.add_column("Track")
            table.add_column("Album", style="cyan")
            table.add_column("Duration", justify="right")
            for index, track in enumerate(artist.top_tracks, 1):
                table.add_row(str(index), track.name, track.album_name, track.duration_display)
            self.console.print(table)

        if artist.top_albums:
            table = Table(title="Albums")
            table.add_column("Album")
            table.add_column("Released", style="dim")
            table.add_column("Tracks", justify="right")
            for album in artist.top_albums:
                table.add_row(album.name, album.release_date, str(album.total_tracks))
            self.console.print(table)

        if artist.related_artists:
            names = ", ".join(related.name for related in artist.related_artists)
            self.console.print(f"[bold]Related:[/bold] {names}")

    def display_search_results(self, results: List[SearchResult]):
        """Print combined search results in a table."""
        if not results:
            self.console.print("[yellow]No results found.[/yellow]")
            return

        table = Table(title="Search Results")
        table.add_column("Type", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Artist", style="cyan")
        for result in results:
            table.add_row(result.result_type, result.name, result.artist or "")
        self.console.print(table)
