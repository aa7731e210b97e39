# src/cosmosql/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
from typing import Optional


class TerminalAppMode:
    """
    Input modes for the query console.

    The editor reads Ctrl+C, Ctrl+V, Ctrl+X and Ctrl+E as ordinary keys, so the
    terminal runs raw (cbreak where raw is refused) with echo off. keypad(True)
    lets curses decode the navigation keys, and a short ESC delay keeps the
    exit key responsive. The screen itself belongs to curses.wrapper.

    `exit()` restores cooked mode and is safe to call when `enter()` never ran.
    """

    ESC_DELAY_MS = 35

    def __init__(self) -> None:
        self._entered: bool = False
        self._stdscr: Optional[curses.window] = None

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self, stdscr: curses.window) -> None:
        self._stdscr = stdscr

        try:
            curses.raw()
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)

        try:
            curses.set_escdelay(self.ESC_DELAY_MS)
        except (AttributeError, curses.error) as e:
            logging.debug("TerminalAppMode: set_escdelay unavailable: %r", e)

        try:
            curses.curs_set(1)
        except curses.error:
            logging.debug("TerminalAppMode: terminal cannot show the cursor")

        # Results scroll only inside Console.scrolling().
        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: raw input, keypad on, ESC delay %d ms", self.ESC_DELAY_MS)

    def exit(self) -> None:
        if not self._entered:
            return

        if self._stdscr is not None:
            try:
                self._stdscr.keypad(False)
            except curses.error:
                logging.debug("TerminalAppMode: keypad(False) failed")

        try:
            curses.noraw()
        except curses.error:
            try:
                curses.nocbreak()
            except curses.error:
                logging.debug("TerminalAppMode: could not leave cbreak mode")
        try:
            curses.echo()
        except curses.error:
            logging.debug("TerminalAppMode: could not turn echo back on")

        self._entered = False
        logging.debug("TerminalAppMode: cooked input restored")
