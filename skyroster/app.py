"""Top-level console menus of the airline booking program."""

from __future__ import annotations

import argparse
from datetime import datetime
from typing import Callable, Optional, Sequence

from .forms import (
    flight_cancel_form,
    flight_form,
    flight_update_form,
    plane_delete_form,
    plane_form,
    plane_update_form,
    user_form,
)
from .models import LEN_FLIGHT_ID
from .system import AirlineSystem
from .terminal import Key, Terminal, accept_id_char, edit_field
from .views import (
    browse_available_seats,
    browse_flights,
    browse_passengers,
    browse_planes,
    show_plane_statistics,
)

_NAV_FOOTER = "[^] Move Up          [v] Move Down      [ESC] Exit"


class ConsoleApp:
    """The keyboard-driven menus that tie the lists and forms together."""

    def __init__(
        self,
        system: Optional[AirlineSystem] = None,
        terminal: Optional[Terminal] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.system = system if system is not None else AirlineSystem()
        self.terminal = terminal if terminal is not None else Terminal()
        self.now = now

    # ------------------------------------------------------------ helpers

    def _menu(
        self,
        title: str,
        options: Sequence[str],
        x: int,
        first_row: int,
        step: int,
        footer: str,
        leave: Sequence[Key] = (Key.ESC,),
        start: int = 0,
    ) -> Optional[int]:
        """Draw a vertical menu; return the chosen index, or None on a leave key."""
        t = self.terminal
        t.clear()
        t.goto(x, first_row - 3)
        t.write(title)
        for i, label in enumerate(options):
            t.goto(x + 3, first_row + i * step)
            t.write(label)
        t.goto(x, first_row + len(options) * step + 1)
        t.write(footer)
        row = start
        while True:
            for i in range(len(options)):
                t.goto(x, first_row + i * step)
                t.write(">>" if i == row else "  ")
            t.goto(0, 0)
            press = t.read_key()
            if press.key is Key.UP and row > 0:
                row -= 1
            elif press.key is Key.DOWN and row < len(options) - 1:
                row += 1
            elif press.key is Key.ENTER:
                return row
            elif press.key in leave:
                return None

    def _run_menu(
        self,
        title: str,
        options: Sequence[tuple[str, Callable[[], object]]],
        x: int,
        footer: str,
        leave: Sequence[Key] = (Key.ESC,),
    ) -> None:
        labels = [label for label, _ in options]
        choice = 0
        while True:
            picked = self._menu(title, labels, x, 6, 3, footer, leave, choice)
            if picked is None:
                return
            choice = picked
            options[picked][1]()

    # -------------------------------------------------------------- menus

    def run(self) -> None:
        """Load the records and show the login screen until input ends."""
        self.system.load(self.now)
        choice = 0
        try:
            while True:
                picked = self._menu(
                    "WELCOME TO OUR AIRLINE - WHO ARE YOU ?",
                    ["USER", "MANAGER"],
                    54,
                    7,
                    3,
                    "[^] Move Up          [v] Move Down",
                    leave=(),
                    start=choice,
                )
                if picked is None:
                    continue
                choice = picked
                if picked == 0:
                    self.user_login()
                else:
                    self.manager_menu()
        except EOFError:
            return

    def user_login(self) -> None:
        """Identify the user, then let them browse flights and book a seat."""
        passenger = user_form(self.terminal, self.system)
        if passenger is None:
            return
        browse_flights(self.terminal, self.system, passenger, None, self.now)

    def manager_menu(self) -> None:
        """Plane list, flight list and plane statistics for the manager."""
        self._run_menu(
            "FLIGHT MANAGEMENT SYSTEM",
            [
                (
                    "[1] Update Plane List",
                    lambda: browse_planes(
                        self.terminal, self.system, self.manage_planes_menu
                    ),
                ),
                (
                    "[2] Update Flight List",
                    lambda: browse_flights(
                        self.terminal,
                        self.system,
                        None,
                        self.flight_manager_menu,
                        self.now,
                    ),
                ),
                (
                    "[3] Flight Statistics (Sorted by Most Flights)",
                    lambda: show_plane_statistics(self.terminal, self.system),
                ),
            ],
            29,
            "[ESC] Exit",
        )

    def manage_planes_menu(self) -> None:
        """Add, delete or edit planes; Tab or Esc goes back."""
        self._run_menu(
            "PLANE MANAGEMENT",
            [
                ("Add Plane", lambda: plane_form(self.terminal, self.system)),
                ("Delete Plane", lambda: plane_delete_form(self.terminal, self.system)),
                (
                    "Edit Plane Details",
                    lambda: plane_update_form(self.terminal, self.system),
                ),
            ],
            51,
            _NAV_FOOTER,
            leave=(Key.ESC, Key.TAB),
        )

    def flight_manager_menu(self) -> None:
        """Flight maintenance, passenger lists and free seats; Tab or Esc goes back."""
        self._run_menu(
            "FLIGHT MANAGEMENT SYSTEM",
            [
                ("[1] Update Flights", self.manage_flights_menu),
                (
                    "[2] Print Passenger List for a Flight",
                    lambda: self.flight_id_prompt(1),
                ),
                (
                    "[3] View Available Seats for a Flight",
                    lambda: self.flight_id_prompt(2),
                ),
            ],
            29,
            "[TAB] Back    [ESC] Exit",
            leave=(Key.ESC, Key.TAB),
        )

    def manage_flights_menu(self) -> None:
        """Create, reschedule or cancel flights."""
        self._run_menu(
            "FLIGHT MANAGEMENT",
            [
                (
                    "Create New Flight",
                    lambda: flight_form(self.terminal, self.system, self.now),
                ),
                (
                    "Edit Flight Departure Time",
                    lambda: flight_update_form(self.terminal, self.system, self.now),
                ),
                (
                    "Cancel Flight",
                    lambda: flight_cancel_form(self.terminal, self.system),
                ),
            ],
            44,
            _NAV_FOOTER,
        )

    def flight_id_prompt(self, choice: int) -> None:
        """Ask for flight IDs; show passengers (choice 1) or free seats (choice 2)."""
        t = self.terminal

        def draw() -> None:
            t.clear()
            t.goto(42, 2)
            t.write("ENTER FLIGHT ID")
            t.goto(42, 6)
            t.write("Enter Flight ID:")
            t.goto(39, 9)
            t.write("[ESC] Exit")

        text = ""
        draw()
        while True:
            t.goto(60 + len(text), 6)
            text, press = edit_field(t, text, LEN_FLIGHT_ID, accept_id_char)
            if press.key is Key.ESC:
                return
            if press.key is not Key.ENTER:
                continue
            flight = self.system.find_flight(text)
            if flight is None:
                t.notify("FLIGHT NOT FOUND")
            elif choice == 1:
                browse_passengers(t, self.system, flight)
            elif choice == 2:
                browse_available_seats(t, self.system, flight, None, self.now)
            text = ""
            draw()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the console program."""
    parser = argparse.ArgumentParser(description="Airline flight and ticket manager.")
    parser.add_argument(
        "--data-dir",
        default="data",
        help="folder holding the Planes, Flights and Passenger records",
    )
    args = parser.parse_args(argv)
    ConsoleApp(AirlineSystem(args.data_dir)).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())