"""
Terminal front end for the typing test.

Usage:
    python -m client.cli login --email you@example.com
    python -m client.cli practice [--duration 60]
    python -m client.cli history [--limit 10]
"""

import argparse
import getpass
import logging
import sys
import time
from typing import Callable, List, Optional

from client.access_gate import AccessGate, GateDecision, Navigator
from client.api_client import ApiClient
from client.auth_session import AuthSession
from client.practice_runner import PracticeRunner
from client.token_store import TokenStore
from config import ConfigError, Settings
from helpers.error_utils import TypingTestError, ValidationFailure

logger = logging.getLogger(__name__)

# Commands that need a signed-in user, keyed by the path the gate protects.
PROTECTED_PATHS = {"whoami": "/profile", "practice": "/practice", "history": "/history"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="typetest", description="Typing speed test client")
    parser.add_argument("--backend-url", help="Override TYPETEST_BACKEND_URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Log in and remember the session")
    login.add_argument("--email", required=True)

    register = commands.add_parser("register", help="Create an account and log in")
    register.add_argument("--username", required=True)
    register.add_argument("--email", required=True)

    commands.add_parser("logout", help="Forget the current session")
    commands.add_parser("whoami", help="Show the signed-in user")

    texts = commands.add_parser("texts", help="List available texts")
    texts.add_argument("--limit", type=int)

    practice = commands.add_parser("practice", help="Take a typing test and save the result")
    practice.add_argument("--duration", type=float, help="Time limit in seconds")

    history = commands.add_parser("history", help="Show recent results")
    history.add_argument("--limit", type=int, default=10)
    return parser


class Cli:
    """Runs one parsed command against an initialized auth session."""

    def __init__(
        self,
        *,
        api: ApiClient,
        auth: AuthSession,
        read_input: Callable[[str], str] = input,
        read_password: Callable[[str], str] = getpass.getpass,
        write: Callable[[str], None] = print,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api = api
        self.auth = auth
        self.gate = AccessGate(auth)
        self.navigator = Navigator()
        self.read_input = read_input
        self.read_password = read_password
        self.write = write
        self.clock = clock

    def run(self, args: argparse.Namespace) -> int:
        path = PROTECTED_PATHS.get(args.command)
        if path is not None:
            outcome = self.gate.navigate(self.navigator, path)
            if outcome.decision is not GateDecision.RENDER:
                self.write("Not logged in. Run 'typetest login' first.")
                return 1
        handler = getattr(self, f"cmd_{args.command}")
        try:
            return handler(args)
        except TypingTestError as e:
            self.write(f"Error: {e.message}")
            return 1

    def cmd_login(self, args: argparse.Namespace) -> int:
        password = self.read_password("Password: ")
        user = self.auth.authenticate(args.email, password)
        self.write(f"Logged in as {user.username}")
        return 0

    def cmd_register(self, args: argparse.Namespace) -> int:
        password = self.read_password("Password: ")
        user = self.auth.register(args.username, args.email, password)
        self.write(f"Registered and logged in as {user.username}")
        return 0

    def cmd_logout(self, args: argparse.Namespace) -> int:
        self.auth.logout()
        self.write("Logged out")
        return 0

    def cmd_whoami(self, args: argparse.Namespace) -> int:
        user = self.auth.user
        self.write(f"{user.username} <{user.email_address}>")
        return 0

    def cmd_texts(self, args: argparse.Namespace) -> int:
        texts = self.api.list_texts(limit=args.limit)
        if not texts:
            self.write("No texts available")
        for text in texts:
            self.write(f"{text.text_id}  {text.title}")
        return 0

    def cmd_practice(self, args: argparse.Namespace) -> int:
        runner = PracticeRunner(
            api=self.api, auth=self.auth, duration=args.duration, clock=self.clock
        )
        session = runner.new_test()
        self.write(f"--- {runner.text.title} ---")
        self.write(session.source_text)
        self.read_input("Press Enter to start...")
        session.start()
        typed = self.read_input("> ")
        session.tick()
        if session.is_read_only:
            self.write("Time's up; input after the deadline was not counted")
        session.handle_input(typed)
        results = session.end_test()
        self.write(results.display())
        if results.typed_chars == 0:
            self.write("Nothing typed; result not saved")
            return 0
        try:
            saved = runner.submit()
        except ValidationFailure as e:
            self.write(f"Result not saved: {e.message}")
            return 1
        self.write(f"Saved result {saved.result_id}")
        return 0

    def cmd_history(self, args: argparse.Namespace) -> int:
        runner = PracticeRunner(api=self.api, auth=self.auth)
        results = runner.history(limit=args.limit)
        if not results:
            self.write("No results yet")
            return 0
        for result in results:
            self.write(
                f"{result.created_at:%Y-%m-%d %H:%M}  WPM: {round(result.wpm)}  "
                f"Accuracy: {result.accuracy:.1f}%"
            )
        stats = runner.stats()
        self.write(
            f"{stats.count} tests, best {stats.best_wpm:.0f} WPM, "
            f"average {stats.average_wpm:.1f} WPM at {stats.average_accuracy:.1f}%"
        )
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2
    api = ApiClient(args.backend_url or settings.backend_url)
    auth = AuthSession(api=api, token_store=TokenStore(settings.token_file))
    auth.initialize()
    return Cli(api=api, auth=auth).run(args)


if __name__ == "__main__":
    sys.exit(main())
