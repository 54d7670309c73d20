"""
Module: InputHandler
Description: Contains InputHandler class with functions that turn mouse, touch and keyboard
input into engine calls and returns the updated game and the type of response that was given.
Inputs: pygame events, board coordinates of the pointer
Outputs: Response
External Sources: None
"""

import enum
import logging
from typing import Optional, Tuple

import pygame

from GameLogic import GameLogic

logger = logging.getLogger(__name__)

LONG_PRESS_MS = 500

LEFT_BUTTON = 1
RIGHT_BUTTON = 3

LEVEL_KEYS = {
    pygame.K_1: "easy",
    pygame.K_2: "medium",
    pygame.K_3: "hard",
    pygame.K_e: "easy",
    pygame.K_m: "medium",
    pygame.K_h: "hard",
}


class ResponseCode(enum.Enum):
    Finished = 0
    InProgress = 2
    Ignored = 3


class Intent(enum.Enum):
    Reveal = "reveal"
    Flag = "flag"
    Reset = "reset"
    ChangeLevel = "level"


class Response:
    """Package and send input handling results."""

    def __init__(
        self,
        game: GameLogic,
        response_code: ResponseCode,
        message: str = "",
        intent: Optional[Intent] = None,
        level: Optional[str] = None,
    ) -> None:
        self.game: GameLogic = game
        self.response_code: ResponseCode = response_code
        self.message: str = message
        self.intent: Optional[Intent] = intent
        self.level: Optional[str] = level


class InputHandler:
    """Handles keyboard, mouse and touch input.

    A press is only turned into an action on release so a long press can be
    told apart from a click. Flag intents always win over reveal intents for
    the same gesture, and every gesture results in at most one engine call.
    """

    def __init__(self, long_press_ms: int = LONG_PRESS_MS) -> None:
        self.long_press_ms = long_press_ms
        self._press: Optional[Tuple[int, int, int]] = None

    def cancel_press(self) -> None:
        self._press = None

    def handle_keyboard_input(self, game: GameLogic, event) -> Response:
        """Handle reset and difficulty keys."""
        if event.type != pygame.KEYDOWN:
            return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

        if event.key == pygame.K_r:
            self.cancel_press()
            return Response(game, ResponseCode.Finished, "Reset requested", Intent.Reset)

        level = LEVEL_KEYS.get(event.key)
        if level is not None:
            self.cancel_press()
            return Response(game, ResponseCode.Finished, f"Switch to {level}", Intent.ChangeLevel, level)

        return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

    def handle_pointer(
        self,
        game: GameLogic,
        event,
        cell: Optional[Tuple[int, int]],
        now_ms: int,
        mods: int = 0,
    ) -> Response:
        """Handle a mouse or touch event already mapped to a board cell (or None)."""
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == RIGHT_BUTTON:
                return self._flag(game, cell)
            if event.button == LEFT_BUTTON:
                return self._press_down(game, cell, now_ms)
            return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

        if event.type == pygame.MOUSEBUTTONUP:
            if event.button != LEFT_BUTTON:
                return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")
            return self._release(game, cell, now_ms, mods)

        if event.type == pygame.FINGERDOWN:
            return self._press_down(game, cell, now_ms)

        if event.type == pygame.FINGERUP:
            return self._release(game, cell, now_ms, 0)

        return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

    def _press_down(self, game: GameLogic, cell: Optional[Tuple[int, int]], now_ms: int) -> Response:
        if cell is None:
            self.cancel_press()
            return Response(game, ResponseCode.Ignored, "Press outside the board")
        row, col = cell
        self._press = (row, col, now_ms)
        return Response(game, ResponseCode.InProgress, f"Pressed ({row}, {col})")

    def _release(
        self, game: GameLogic, cell: Optional[Tuple[int, int]], now_ms: int, mods: int
    ) -> Response:
        press, self._press = self._press, None
        if press is None or cell is None:
            return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

        row, col, started = press
        if (row, col) != cell:
            logger.debug("Press at (%d, %d) released over %s", row, col, cell)
            return Response(game, ResponseCode.Ignored, "Press moved to another cell")

        wants_flag = bool(mods & (pygame.KMOD_SHIFT | pygame.KMOD_CTRL))
        if wants_flag or now_ms - started >= self.long_press_ms:
            return self._flag(game, cell)
        return self._reveal(game, cell)

    def _flag(self, game: GameLogic, cell: Optional[Tuple[int, int]]) -> Response:
        self.cancel_press()
        if cell is None:
            return Response(game, ResponseCode.Ignored, "Flag outside the board")
        if game.is_terminal:
            return Response(game, ResponseCode.Ignored, "Game is over")
        row, col = cell
        if game.toggle_flag(row, col):
            return Response(game, ResponseCode.Finished, f"Toggled flag at ({row}, {col})", Intent.Flag)
        return Response(game, ResponseCode.Ignored, f"Cannot flag ({row}, {col})", Intent.Flag)

    def _reveal(self, game: GameLogic, cell: Tuple[int, int]) -> Response:
        if game.is_terminal:
            return Response(game, ResponseCode.Ignored, "Game is over")
        row, col = cell
        result = game.reveal(row, col)
        if not result.changed:
            return Response(game, ResponseCode.Ignored, f"Nothing to reveal at ({row}, {col})", Intent.Reveal)
        if result.hit_bomb:
            return Response(game, ResponseCode.Finished, "You Lost!", Intent.Reveal)
        if result.won:
            return Response(game, ResponseCode.Finished, "You Won!", Intent.Reveal)
        return Response(game, ResponseCode.Finished, f"Revealed {result.revealed} cells", Intent.Reveal)
