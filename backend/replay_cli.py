"""Terminal driver for the playback engine.

    trace-playback run FILE [--play] [--explain] [--api-url URL]
    trace-playback serve [--host HOST] [--port PORT]
"""

import argparse
import asyncio
import sys
from dataclasses import replace

from config import Settings, configure_logging
from session import PlaybackSession


def format_frame(session: PlaybackSession) -> str:
    step = session.current_step
    if step is None:
        return f"{session.frame_label}  (no steps)"

    source = ""
    for line in session.source_view():
        if line.active:
            source = line.text.strip()
            break
    lines = [f"{session.frame_label}  line {step.line_no}: {source}"]
    for name, value in session.locals_view().items():
        lines.append(f"    {name} = {value}")
    return "\n".join(lines)


async def replay(session: PlaybackSession, code: str, play: bool = False, explain: bool = False) -> int:
    outcome = await session.submit(code)
    notification = session.notifications.current
    if notification is not None:
        print(f"[{notification.kind.value}] {notification.message}")
    if outcome is None:
        return 1

    if play and session.model.length() > 1:
        # the listener also prints the first frame, when play starts
        session.controller.subscribe(lambda _: print(format_frame(session)))
        session.controller.toggle_auto_play()
        await session.controller.wait_until_paused()
    else:
        print(format_frame(session))

    if explain:
        await session.explain()
        print("--- explanation ---")
        print(session.explanation.display_text)

    if session.visible_output:
        print("--- output ---")
        print(session.visible_output, end="" if session.visible_output.endswith("\n") else "\n")

    return 0 if session.succeeded else 2


def run_command(args, settings: Settings) -> int:
    try:
        with open(args.file) as f:
            code = f.read()
    except OSError as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    if args.api_url:
        settings = replace(settings, api_url=args.api_url.rstrip("/"))
    session = PlaybackSession.from_settings(settings)
    return asyncio.run(replay(session, code, play=args.play, explain=args.explain))


def serve_command(args, settings: Settings) -> int:
    import uvicorn

    uvicorn.run("main:app", host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Replay the execution trace of a Python snippet")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Submit a file and print its trace")
    run.add_argument("file", help="Source file to submit")
    run.add_argument("--play", action="store_true", help="Auto-play through every step")
    run.add_argument("--explain", action="store_true", help="Explain the last frame shown")
    run.add_argument("--api-url", default=None, help="Forwarding layer base URL")

    serve = sub.add_parser("serve", help="Run the forwarding layer")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings)

    if args.command == "run":
        return run_command(args, settings)
    return serve_command(args, settings)


if __name__ == "__main__":
    sys.exit(main())
