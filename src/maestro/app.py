"""Command-line bootstrap for Maestro AI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TextIO, get_args, get_origin, get_type_hints

from .ai.client import ClientSettings, GenerationClient, TextGenerator
from .music.vocabulary import WEAKNESS_OPTIONS, Goal, Instrument, Key, Mood, SkillLevel, Style, parse_choice
from .services.settings import Settings, SettingsStore, redact_secret
from .surfaces.flows import SURFACES, AssistantSurface, ChordSurface, Surface
from .surfaces.models import SurfaceStatus
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_GENERATION_FAILED = 1
EXIT_USAGE = 2

_COMMAND_SURFACES: Mapping[str, str] = {
    "chords": "chords",
    "exercises": "exercises",
    "path": "learning_path",
    "library": "library",
    "ask": "assistant",
}
_SELECTION_ARGS: Mapping[str, tuple[str, ...]] = {
    "chords": ("key", "style", "mood"),
    "exercises": ("instrument", "weakness"),
    "path": ("instrument", "level", "goal"),
    "library": ("song_title", "artist", "level"),
}


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the application."""

    log_path = logging_utils.setup_logging(debug, force=force)
    _LOGGER.debug("Logging to %s (debug=%s)", log_path, debug)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        settings = active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        settings = Settings()
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `maestro` console script."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    debug = _env_flag("MAESTRO_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("MAESTRO_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return EXIT_USAGE

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return EXIT_OK

    if args.command is None:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)
        debug = True

    if not settings.api_key:
        print(
            "No API key configured. Set MAESTRO_API_KEY or use --set api_key=...",
            file=sys.stderr,
        )
        return EXIT_USAGE

    client = _build_client(settings, debug_logging=debug)
    return asyncio.run(run_command(args, client, settings=settings))


async def run_command(
    args: argparse.Namespace,
    generator: TextGenerator,
    *,
    settings: Settings | None = None,
    stream: TextIO | None = None,
) -> int:
    """Drive one surface through a single generation and print the result."""

    destination = stream or sys.stdout
    active_settings = settings or Settings()
    surface = _build_surface(args, generator)
    try:
        if isinstance(surface, AssistantSurface):
            task = surface.ask(args.question)
        else:
            task = surface.generate()
        if task is None:
            print("Nothing to generate: required input is missing.", file=sys.stderr)
            return EXIT_USAGE
        await task
    finally:
        await surface.coordinator.wait_pending()
        await _close_generator(generator)

    state = surface.state
    if state.status is SurfaceStatus.ERROR:
        print(state.error, file=sys.stderr)
        log_path = logging_utils.get_log_path()
        if log_path is not None:
            print(f"Details: {log_path}", file=sys.stderr)
        return EXIT_GENERATION_FAILED

    if getattr(args, "speak", False) and isinstance(surface, ChordSurface):
        utterance = surface.speech()
        if utterance is None:
            print("Nothing to read aloud.", file=sys.stderr)
            return EXIT_GENERATION_FAILED
        payload = {
            "text": utterance.text,
            "lang": active_settings.speech_lang or utterance.lang,
            "rate": active_settings.speech_rate or utterance.rate,
        }
        json.dump(payload, destination, ensure_ascii=False, indent=2)
        destination.write("\n")
        return EXIT_OK

    output = surface.rendered() if args.format == "html" else state.text
    destination.write(output)
    destination.write("\n")
    return EXIT_OK


def _build_client(settings: Settings, *, debug_logging: bool = False) -> GenerationClient:
    client_settings = ClientSettings(
        api_key=settings.api_key,
        base_url=settings.base_url,
        model=settings.model,
        organization=settings.organization,
        request_timeout=settings.request_timeout,
        default_headers=settings.default_headers,
        debug_logging=debug_logging or settings.debug_logging,
    )
    return GenerationClient(client_settings)


def _build_surface(args: argparse.Namespace, generator: TextGenerator) -> Surface[Any]:
    command = args.command
    try:
        factory = SURFACES[_COMMAND_SURFACES[command]]
    except KeyError:
        raise ValueError(f"Unknown command '{command}'") from None
    surface = factory(generator)
    selection = _given(args, *_SELECTION_ARGS.get(command, ()))
    if selection:
        surface.select(**selection)
    return surface


def _given(args: argparse.Namespace, *names: str) -> Dict[str, Any]:
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


async def _close_generator(generator: TextGenerator) -> None:
    close = getattr(generator, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception as exc:  # pragma: no cover
        _LOGGER.debug("Generator shutdown failed: %s", exc)


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _choice(enum_cls: type[Enum]) -> Callable[[str], Enum]:
    def convert(raw: str) -> Enum:
        try:
            return parse_choice(enum_cls, raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = enum_cls.__name__
    return convert


def _weakness(raw: str) -> str:
    value = raw.strip()
    if value.isdigit():
        index = int(value)
        if 1 <= index <= len(WEAKNESS_OPTIONS):
            return WEAKNESS_OPTIONS[index - 1]
        raise argparse.ArgumentTypeError(f"weakness index must be between 1 and {len(WEAKNESS_OPTIONS)}")
    if not value:
        raise argparse.ArgumentTypeError("weakness must not be empty")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maestro",
        description="Generate chord progressions, exercises, learning paths and answers with AI.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload (with secrets redacted) and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.maestro/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this run (repeatable).",
    )
    parser.add_argument(
        "--format",
        choices=("html", "text"),
        default="html",
        help="Print the rendered HTML fragment (default) or the raw response text.",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    chords = commands.add_parser("chords", help="Generate a chord progression.")
    chords.add_argument("--key", type=_choice(Key), help="Key, e.g. 'Do Mayor' or C_MAJOR.")
    chords.add_argument("--style", type=_choice(Style))
    chords.add_argument("--mood", type=_choice(Mood))
    chords.add_argument(
        "--speak",
        action="store_true",
        help="Print the speech-synthesis payload instead of the progression.",
    )

    exercises = commands.add_parser("exercises", help="Generate warm-up exercises.")
    exercises.add_argument("--instrument", type=_choice(Instrument))
    exercises.add_argument(
        "--weakness",
        type=_weakness,
        help="Free text, or 1-%d to pick: %s." % (len(WEAKNESS_OPTIONS), "; ".join(WEAKNESS_OPTIONS)),
    )

    path = commands.add_parser("path", help="Create a four-week learning path.")
    path.add_argument("--instrument", type=_choice(Instrument))
    path.add_argument("--level", type=_choice(SkillLevel))
    path.add_argument("--goal", type=_choice(Goal))

    library = commands.add_parser("library", help="Transcribe a song into a simplified chord chart.")
    library.add_argument("song_title", metavar="title")
    library.add_argument("artist")
    library.add_argument("--level", type=_choice(SkillLevel))

    ask = commands.add_parser("ask", help="Ask the music-theory assistant a question.")
    ask.add_argument("question")
    return parser


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        annotation = type_hints.get(key, fields[key].type)
        overrides[key] = _coerce_value(annotation, raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    target = _resolve_annotation(annotation)
    normalized = raw_value.strip()

    if target is str or target is Any:
        return normalized
    if target is bool:
        return _parse_bool(normalized)
    if target is int:
        return int(normalized, 10)
    if target is float:
        return float(normalized)
    if target is dict:
        try:
            payload = json.loads(normalized or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Dict overrides must be valid JSON objects") from exc
        if not isinstance(payload, dict):
            raise ValueError("Dict overrides must be valid JSON objects")
        return payload
    return normalized


def _resolve_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin is dict:
        return origin
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if not args:
        return origin
    return args[0]


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    payload = asdict(settings)
    payload["api_key"] = redact_secret(settings.api_key)
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    output = {"settings": payload, "meta": metadata}
    json.dump(output, destination, indent=2, ensure_ascii=False)
    destination.write("\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in os.environ if name.startswith("MAESTRO_"))


__all__ = ["main", "run_command", "configure_logging", "load_settings"]
