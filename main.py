#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
FormFlow - multi-step form engine
Console entry point driving the sample sign-up form.

Commands:
    set name=value   set a field on any step
    next             validate the current step and move forward
    back             go to the previous step
    goto N           jump to an already visited step (1-based)
    submit           validate the whole form and submit it
    show             print the current step, its fields and errors
    quit             abandon the session and exit
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from typing import Any, Mapping

from app.config import Config
from app.sample_forms import build_signup_steps
from models.navigation_state import NavigationOutcome, NavigationResult
from models.retry import RetryConfig, RetryState
from services.error_mapper import describe_retry, map_exception
from services.http_submitter import HttpSubmitter
from services.translation_manager import set_language, tr
from ui.wizards.framework import WizardListener, WizardSession
from utils.logger import setup_logger

logger = None


async def echo_submitter(values: Mapping[str, Any]) -> Any:
    """Local submitter: accepts everything and returns it."""
    return {"status": "accepted", "values": dict(values)}


class ConsoleListener(WizardListener):
    """Prints session events."""

    def __init__(self, retry_config: RetryConfig):
        self.retry_config = retry_config

    def on_retry_scheduled(self, state: RetryState):
        print(describe_retry(state, self.retry_config))

    def on_validation_failed(self, step_index: int, errors: Mapping[str, str]):
        print(tr("validation.check_data"))
        for name, message in sorted(errors.items()):
            print(f"  {name}: {message}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{Config.APP_NAME} sample sign-up form")
    parser.add_argument("--url", default=Config.SUBMIT_URL or None,
                        help="Submission endpoint (default: echo the values locally)")
    parser.add_argument("--lang", choices=Config.SUPPORTED_LANGUAGES, default=Config.LANGUAGE,
                        help="Message language")
    parser.add_argument("--max-retries", type=int, default=None,
                        help="Retries after the first failed submission")
    return parser.parse_args(argv)


def show(session: WizardSession):
    step = session.current_step
    print(tr("wizard.step_of", current=step.index + 1, total=len(session.steps)) + f" - {step.title}")
    for descriptor in session.fields_for_current_step():
        line = f"  {descriptor.name} = {descriptor.value!r}"
        if descriptor.has_error:
            line += f"  <- {descriptor.error}"
        print(line)


def report(session: WizardSession, result: NavigationResult):
    if result.outcome is NavigationOutcome.REJECTED:
        print(f"[{result.reason}]")
    elif result.outcome is NavigationOutcome.SUCCEEDED:
        print(tr("wizard.succeeded"))
        print(result.payload)
    elif result.outcome is NavigationOutcome.FAILED:
        print(map_exception(result.error, attempts=result.attempts))
    elif result.outcome is NavigationOutcome.CANCELLED:
        print(tr("wizard.cancelled"))
    elif result.outcome is NavigationOutcome.MOVED:
        show(session)


async def run_console(args: argparse.Namespace) -> int:
    retry_config = RetryConfig.from_config()
    if args.max_retries is not None:
        retry_config = replace(retry_config, max_retries=args.max_retries)

    submitter = HttpSubmitter(args.url) if args.url else echo_submitter
    session = WizardSession(
        build_signup_steps(),
        submitter,
        retry_config=retry_config,
        listeners=[ConsoleListener(retry_config)],
    )
    logger.info(f"Session {session.reference_number} ready (submitting to {args.url or 'local echo'})")
    show(session)

    while session.is_active:
        try:
            line = (await asyncio.to_thread(input, "> ")).strip()
        except EOFError:
            break
        if not line:
            continue

        command, _, argument = line.partition(" ")
        if command == "quit":
            break
        elif command == "show":
            show(session)
        elif command == "set":
            name, sep, value = argument.partition("=")
            if not sep or not name.strip():
                print("usage: set name=value")
                continue
            session.set_field(name.strip(), value.strip())
        elif command == "next":
            report(session, await session.next())
        elif command == "back":
            report(session, session.back())
        elif command == "goto":
            try:
                report(session, session.go_to_step(int(argument) - 1))
            except (ValueError, IndexError) as e:
                print(f"[{e}]")
        elif command == "submit":
            print(tr("wizard.submitting"))
            report(session, await session.submit())
        else:
            print(__doc__.split("Commands:")[1])

    session.abandon("console closed")
    return 0


def main(argv=None):
    """Main application entry point."""
    global logger

    args = parse_args(argv)
    logger = setup_logger()
    set_language(args.lang)

    logger.info("=" * 80)
    logger.info(f"Starting {Config.APP_NAME}")
    logger.info("=" * 80)

    try:
        exit_code = asyncio.run(run_console(args))
    except KeyboardInterrupt:
        exit_code = 130
    except Exception as e:
        error_msg = f"Fatal error: {e}"
        print(f"\n[ERROR] {error_msg}")
        print(f"\nPlease check {Config.LOG_PATH} for details")
        logger.exception(error_msg)
        exit_code = 1

    logger.info(f"Application closed with exit code: {exit_code}")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
