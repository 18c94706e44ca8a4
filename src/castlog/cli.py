"""CLI entry point for castlog."""

import json
import logging
import sys
from pathlib import Path

import requests
import typer
from rich.console import Console

from castlog.catalog.episodes import assign_seasons
from castlog.catalog.site import SiteClient
from castlog.config.logging import setup_logging
from castlog.config.manager import ConfigManager
from castlog.config.schema import CastlogConfig
from castlog.feeds.parser import RSSParser
from castlog.feeds.scan import episodes_missing_audio, unrecorded_audio
from castlog.pipeline.scheduler import PollMode, PollScheduler, SchedulerState
from castlog.pipeline.updater import EpisodeUpdater, PipelineOptions, parse_override
from castlog.social.search import TwitterClient
from castlog.utils.api_keys import get_validated_api_key
from castlog.utils.errors import CastlogError, NoCaptionsError
from castlog.utils.repo import chdir_root, check_repo
from castlog.utils.urls import youtube_video_id
from castlog.video.captions import CaptionFetcher

app = typer.Typer(
    name="castlog",
    help="Keep a podcast's episode log in sync with its announcements",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def _print_json(data: object) -> None:
    # Plain print: rich would wrap and highlight the JSON
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _load_config(ctx: typer.Context) -> CastlogConfig:
    """Load the config and apply its log level, unless --verbose was given."""
    config = ConfigManager().load_config()
    if not (ctx.obj or {}).get("verbose"):
        logging.getLogger().setLevel(config.log_level)
    return config


def _poll_mode(poll: bool, poll_one: bool, single: bool) -> PollMode:
    if single:
        return PollMode.SINGLE
    if poll_one:
        return PollMode.POLL_ONE
    if poll:
        return PollMode.POLL
    return PollMode.ONCE


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """castlog - maintain the episode log of a podcast site."""
    ctx.obj = {"verbose": verbose}
    setup_logging(verbose=verbose, log_file=log_file)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from castlog import __version__

    console.print(f"[bold cyan]castlog[/bold cyan] v{__version__}")


@app.command("update")
def update_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", help="Create updates even if the files exist"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Do not create or modify any files"
    ),
    poll: bool = typer.Option(False, "--poll", help="Poll for updates"),
    poll_one: bool = typer.Option(
        False, "--poll-one", help="Poll until a single update is found"
    ),
    single: bool = typer.Option(
        False, "--single", help="Check once and succeed whether or not there is an update"
    ),
    override: str | None = typer.Option(
        None, "--override", help="Override latest episode with NUM[:YYYY-MM-DD]"
    ),
    edit: bool = typer.Option(
        False, "--edit", help="Edit new or modified files after update"
    ),
    skip_video_check: bool = typer.Option(
        False, "--skip-video-check", help="Record updates that have no video ID"
    ),
    check_repo_name: str | None = typer.Option(
        None,
        "--check-repo",
        help="Check that the working directory is a clone of this repo "
        "(defaults to the configured name; pass '' to skip)",
    ),
) -> None:
    """Check for new episodes and create episode files for them.

    Exit status 0 means an update was generated, 3 means no update was
    available (only without --poll, --poll-one and --single). Any other
    status is a failure.

    Examples:
        castlog update

        castlog update --poll-one --edit

        castlog update --override 140:2021-01-15 --dry-run
    """
    if override is not None:
        try:
            parse_override(override)
        except ValueError as e:
            raise typer.BadParameter(f"{override!r}: {e}", param_hint="--override")

    try:
        twitter_token = get_validated_api_key("TWITTER_TOKEN", "twitter")
        youtube_key = get_validated_api_key("YOUTUBE_API_KEY", "youtube")
        config = _load_config(ctx)

        repo_name = config.check_repo if check_repo_name is None else check_repo_name
        if repo_name:
            check_repo(repo_name)
        elif check_repo_name is None:
            chdir_root()
    except CastlogError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    options = PipelineOptions(
        force=force,
        dry_run=dry_run,
        edit=edit,
        skip_video_check=skip_video_check,
        override=override,
    )
    session = requests.Session()
    updater = EpisodeUpdater(
        config,
        site=SiteClient(config.site_url, session=session),
        twitter=TwitterClient(twitter_token, session=session),
        youtube_key=youtube_key,
        options=options,
        session=session,
    )
    scheduler = PollScheduler(
        _poll_mode(poll, poll_one, single),
        run_pass=updater.check_for_update,
        config=config.schedule,
    )

    try:
        result = scheduler.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)

    if result.state is SchedulerState.FAILED:
        console.print(f"[red]✗[/red] Update failed: {result.error}")
    sys.exit(result.exit_code)


@app.command("scan-audio")
def scan_audio_command(
    ctx: typer.Context,
    json_feed: bool = typer.Option(
        False, "--json-feed", help="Print the audio feed as JSON and exit"
    ),
    log_missing: bool = typer.Option(
        False, "--log-missing", help="List episodes missing audio and exit"
    ),
) -> None:
    """List audio episodes that the episode log has not recorded yet.

    For each unrecorded audio episode, prints the acast and audio-file
    lines to paste into its episode file.
    """
    try:
        config = _load_config(ctx)
        audio = RSSParser().fetch_feed(config.feed_url)
        if json_feed:
            _print_json({"episodes": [a.to_json() for a in audio]})
            return

        episodes = SiteClient(config.site_url).all_episodes()
        if log_missing:
            missing = episodes_missing_audio(episodes)
            _print_json(
                {
                    "missing": [
                        ep.model_dump(mode="json", exclude={"detail", "extra"})
                        for ep in missing
                    ]
                }
            )
            return

        pending = unrecorded_audio(audio, episodes)
    except CastlogError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)

    if not pending:
        err_console.print("[yellow]No audio episodes require updating[/yellow]")
        sys.exit(1)

    for item in pending:
        published = f"{item.published:%Y-%m-%d %H:%M}" if item.published else "????-??-??"
        err_console.print(f"[dim]{published}[/dim] {item.title!r}")
        print(f"acast: {item.page_link}")
        if item.file_link:
            print(f"audio-file: {item.file_link}")


@app.command("captions")
def captions_command(
    ctx: typer.Context,
    video_id: str | None = typer.Option(None, "--id", help="Video ID to fetch"),
    episode: str | None = typer.Option(
        None, "--episode", help="Episode whose video captions to fetch"
    ),
) -> None:
    """Fetch the text captions of a YouTube video as JSON.

    Either the --id of the video must be given directly, or the --episode
    whose video URL is to be used.
    """
    if not video_id and not episode:
        console.print("[red]✗[/red] You must set a non-empty video --id or an --episode")
        sys.exit(1)

    try:
        if episode:
            config = _load_config(ctx)
            ep = SiteClient(config.site_url).fetch_episode(episode)
            video_id = youtube_video_id(ep.youtube)
            if not video_id:
                console.print(f"[red]✗[/red] Unable to find video ID for episode {ep.episode}")
                sys.exit(1)
            err_console.print(f"Found video ID {video_id!r} for episode {ep.episode}")

        transcript = CaptionFetcher().fetch(video_id)
    except NoCaptionsError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)
    except CastlogError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)

    _print_json(transcript.to_json())


@app.command("seasons")
def seasons_command(
    directory: Path = typer.Option(..., "--dir", help="Episodes directory"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report assignments without writing files"
    ),
) -> None:
    """Assign a season to every episode file that lacks one."""
    if not directory.is_dir():
        console.print(f"[red]✗[/red] Not a directory: {directory}")
        sys.exit(1)

    try:
        assigned = assign_seasons(directory, dry_run=dry_run)
    except CastlogError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Assigned seasons to {len(assigned)} episodes")


if __name__ == "__main__":
    app()
