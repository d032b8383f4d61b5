import argparse
import sys
from pathlib import Path


def _configure_logging(verbose: bool):
    from loguru import logger

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _load_config(args):
    from racereplay.config import load_config_or_defaults

    return load_config_or_defaults(getattr(args, "config", None))


def _load_file(path: Path, athlete: str | None):
    from racereplay.ingest.fit_parser import parse_fit_file
    from racereplay.ingest.gpx_parser import parse_gpx_file

    suffix = path.suffix.lower()
    if suffix == ".gpx":
        return parse_gpx_file(path, athlete)
    if suffix == ".fit":
        return parse_fit_file(path, athlete)
    raise ValueError(f"Unsupported file type {suffix!r} (expected .gpx or .fit)")


def _load_activities(args, config) -> list:
    """Load every requested source; report failures and keep going."""
    from racereplay.errors import IngestionError

    activities = []
    errors = []

    for file_name in getattr(args, "files", None) or []:
        path = Path(file_name)
        try:
            activities.append(_load_file(path, getattr(args, "athlete", None)))
        except (IngestionError, ValueError, OSError) as e:
            errors.append((str(path), str(e)))

    strava_refs = getattr(args, "strava", None) or []
    if strava_refs:
        from racereplay.ingest.strava_client import StravaActivityClient, parse_activity_ref

        client = None
        for ref in strava_refs:
            activity_id = parse_activity_ref(ref)
            if activity_id is None:
                errors.append((ref, "Invalid Strava activity URL. Use a URL like "
                                    "https://www.strava.com/activities/123456789"))
                continue
            try:
                if client is None:
                    client = StravaActivityClient.from_config(config)
                activities.append(client.get_activity_with_streams(activity_id))
            except IngestionError as e:
                errors.append((f"strava:{activity_id}", str(e)))

    if getattr(args, "sample", False):
        from racereplay.sample import sample_activities

        activities.extend(sample_activities())

    for source, message in errors:
        print(f"  ERROR {source}: {message}")

    return activities


def _print_snapshot(session, snapshot):
    from racereplay.formatting import format_distance, format_pace, format_speed, format_time

    status = "▶" if snapshot.is_playing else "■"
    print(f"\n{status} {format_time(snapshot.current_time)} / {format_time(snapshot.max_time)}"
          f"  ({snapshot.playback_speed:g}x)")
    for s in snapshot.stats:
        activity = session.activities[s.index]
        flag = " FINISHED" if s.finished else ""
        print(f"  {s.position:>2}. {activity.athlete.name:<20} "
              f"{format_distance(s.distance):>9}  {format_speed(s.speed_kmh):>10}  "
              f"{format_pace(s.speed_kmh):>5}/km  {s.progress_pct:5.1f}%{flag}")


def cmd_race(args):
    from racereplay.playback import FrameScheduler
    from racereplay.session import RaceSession

    _configure_logging(args.verbose)
    config = _load_config(args)
    activities = _load_activities(args, config)
    if not activities:
        print("No activities loaded. Pass .gpx/.fit files, --strava IDs, or --sample.")
        sys.exit(1)

    speed = args.speed if args.speed is not None else config["playback"]["speed"]
    fps = args.fps if args.fps is not None else config["playback"]["fps"]

    try:
        session = RaceSession(activities, playback_speed=speed)
        scheduler = FrameScheduler(session.clock, fps=fps)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.seek is not None:
        session.clock.seek(args.seek)

    frames_per_report = max(1, int(round(fps * args.report_every)))

    def on_frame(frame):
        if frame % frames_per_report == 0:
            _print_snapshot(session, session.snapshot())

    session.clock.play()
    try:
        frames = scheduler.run(on_frame=on_frame)
    except KeyboardInterrupt:
        session.clock.pause()
        frames = None

    _print_snapshot(session, session.snapshot())
    if args.verbose and frames is not None:
        print(f"\n  Frames rendered: {frames}")


def cmd_standings(args):
    from racereplay.session import RaceSession

    _configure_logging(args.verbose)
    config = _load_config(args)
    activities = _load_activities(args, config)
    if not activities:
        print("No activities loaded.")
        sys.exit(1)

    session = RaceSession(activities)
    session.clock.seek(args.at)
    _print_snapshot(session, session.snapshot())


def cmd_info(args):
    from racereplay.formatting import format_distance, format_speed, format_time

    _configure_logging(args.verbose)
    config = _load_config(args)
    activities = _load_activities(args, config)
    if not activities:
        print("No activities loaded.")
        sys.exit(1)

    for activity in activities:
        avg_kmh = activity.total_distance / activity.total_time * 3.6 if activity.total_time else 0.0
        print(f"\n{activity.name}  [{activity.id}]")
        print(f"  Athlete:   {activity.athlete.name} ({activity.athlete.color})")
        print(f"  Start:     {activity.start_time}")
        print(f"  Points:    {len(activity.points)}")
        print(f"  Distance:  {format_distance(activity.total_distance)}")
        print(f"  Duration:  {format_time(activity.total_time)}")
        print(f"  Avg speed: {format_speed(avg_kmh)}")


def _add_source_args(p):
    p.add_argument("files", nargs="*", help=".gpx or .fit files")
    p.add_argument("--strava", action="append", metavar="ID_OR_URL",
                   help="Strava activity id or URL (repeatable)")
    p.add_argument("--sample", action="store_true", help="Add the built-in demo racers")
    p.add_argument("--athlete", type=str, help="Athlete name for uploaded files (default: file name)")
    p.add_argument("--config", type=str, help="Path to config.yaml")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose output")


def build_parser():
    parser = argparse.ArgumentParser(prog="racereplay",
                                     description="Race recorded GPS tracks side by side")
    subparsers = parser.add_subparsers(dest="command")

    race_parser = subparsers.add_parser("race", help="Replay activities on a shared clock")
    _add_source_args(race_parser)
    race_parser.add_argument("--speed", type=float, help="Playback multiplier (e.g. 0.5, 1, 2, 5)")
    race_parser.add_argument("--fps", type=float, help="Frames per second")
    race_parser.add_argument("--seek", type=float, metavar="SECONDS", help="Start at this race time")
    race_parser.add_argument("--report-every", type=float, default=1.0, metavar="SECONDS",
                             help="Wall-clock seconds between standings printouts")
    race_parser.set_defaults(func=cmd_race)

    standings_parser = subparsers.add_parser("standings", help="Standings at one race time")
    _add_source_args(standings_parser)
    standings_parser.add_argument("--at", type=float, required=True, metavar="SECONDS",
                                  help="Race time in seconds")
    standings_parser.set_defaults(func=cmd_standings)

    info_parser = subparsers.add_parser("info", help="Summarize activities")
    _add_source_args(info_parser)
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    args.func(args)
