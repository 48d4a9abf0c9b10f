"""Thin CLI router for the developer tools."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

USAGE = """\
step-notifier — route BDD step/hook outcomes to a reporting host

Usage:
  step-notifier replay <script.yaml> [options]   Replay an event script, print notifications
  step-notifier help                             Show this message

Options:
  --strict / --no-strict                                Fail on undefined/pending steps
  --allow-started-ignored / --no-allow-started-ignored  Start descriptions eagerly
  --policy <file.yaml>                                  Read policy switches from a YAML file
  -v, --verbose                                         Debug logging on stderr

Options are also read from $STEP_NOTIFIER_OPTIONS (command line wins).
"""


def main(argv: list[str] | None = None):
    args = list(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else None

    if command == "replay":
        cmd_replay(args[1:])

    elif command in ("help", "--help", "-h", None):
        print(USAGE)

    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE)
        sys.exit(1)


def cmd_replay(args: list[str]) -> None:
    from step_notifier.config import load_policy, parse_options, policy_from_env
    from step_notifier.errors import PolicyConfigError, ReplayScriptError
    from step_notifier.logging_utils import configure_logging
    from step_notifier.notify.sinks import StreamSink
    from step_notifier.replay import replay

    script_path: Path | None = None
    policy_path: Path | None = None
    options: list[str] = []
    verbose = False

    it = iter(args)
    for arg in it:
        if arg in ("-v", "--verbose"):
            verbose = True
        elif arg == "--policy":
            value = next(it, None)
            if value is None:
                print("--policy needs a file", file=sys.stderr)
                sys.exit(1)
            policy_path = Path(value)
        elif arg.startswith("-"):
            options.append(arg)
        elif script_path is None:
            script_path = Path(arg)
        else:
            print(f"Unexpected argument: {arg}", file=sys.stderr)
            sys.exit(1)

    if script_path is None:
        print("Usage: step-notifier replay <script.yaml> [options]", file=sys.stderr)
        sys.exit(1)
    if not script_path.exists():
        print(f"Script not found: {script_path}", file=sys.stderr)
        sys.exit(1)

    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        policy = policy_from_env()
        if policy_path is not None:
            policy = load_policy(policy_path, policy)
        policy = parse_options(options, policy)
    except PolicyConfigError as e:
        print(f"✗ Policy error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        notifications = replay(script_path.read_text(encoding="utf-8"), StreamSink(sys.stdout), policy)
    except ReplayScriptError as e:
        print(f"✗ Replay error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.getLogger(__name__).debug("replayed %d notifications", len(notifications))


if __name__ == "__main__":
    main()
