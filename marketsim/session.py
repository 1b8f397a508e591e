# marketsim/session.py
# Drives one game: builds turn payloads, applies outcomes, keeps short history, grades at the end.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .catalog import Catalog, catalog_to_dict, default_catalog
from .grading import build_report
from .turn_service import TurnSimulator

logger = logging.getLogger("GameSession")

HISTORY_SIZE = 3
NO_RESPONSE = "(No response)"
NO_EXPLANATION = "(No explanation available)"


class GameSession:
    def __init__(self, simulator: TurnSimulator, catalog: Optional[Catalog] = None,
                 max_turns: int = 10, cash: int = 500, loyalty: int = 10,
                 market_share: int = 30, current_turn: int = 1):
        self.simulator = simulator
        self.catalog = catalog if catalog is not None else default_catalog()
        self.max_turns = max_turns
        self.turn = current_turn
        self.stats: Dict[str, Any] = {"cash": cash, "loyalty": loyalty, "marketShare": market_share}
        self.event = ""
        self.rival_move = ""
        self.history: List[Dict[str, Any]] = []
        self.selected_option: Optional[str] = None
        self.last_chosen_option: Optional[str] = None
        self.last_explanation = ""
        self.last_was_custom = False
        self.done = False
        self.report: Optional[Dict[str, Any]] = None

    @property
    def progress(self) -> float:
        return self.turn / self.max_turns if self.max_turns else 0.0

    def _no_response(self) -> Dict[str, Any]:
        return {"stats": dict(self.stats), "done": False,
                "event": NO_RESPONSE, "rivalMove": NO_RESPONSE}

    def _call(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.simulator.simulate(payload)
        except Exception as e:
            logger.warning("simulateTurn failed: %s", e)
            return self._no_response()
        if not isinstance(result, dict):
            logger.warning("simulateTurn returned %s, expected an object", type(result).__name__)
            return self._no_response()
        return result

    def start(self) -> Dict[str, Any]:
        # turn 0 only seeds the opening event / rival move
        result = self._call({
            "turn": 0,
            "stats": {"cash": 500, "loyalty": 10, "marketShare": 30},
            "option": None,
        })
        self.event = result.get("event") or ""
        self.rival_move = result.get("rivalMove") or ""
        return result

    def select(self, option_code: Optional[str]) -> None:
        self.selected_option = option_code

    def submit(self, selected_option: Optional[str] = None, custom_move: str = "") -> Optional[Dict[str, Any]]:
        """
        Play one turn. A non-blank custom move wins over the selected option.
        Returns the simulator outcome, or None when there was nothing to submit.
        """
        if self.done:
            logger.info("submit ignored: game already finished")
            return None
        if selected_option is not None:
            self.selected_option = selected_option

        use_custom = (custom_move or "").strip() != ""
        choice = custom_move.strip() if use_custom else self.selected_option
        if not choice:
            return None

        payload = {
            "turn": self.turn,
            "maxTurns": self.max_turns,
            "stats": dict(self.stats),
            "choice": choice,
            "options": catalog_to_dict(self.catalog),
            "history": list(self.history),
        }
        self.last_explanation = ""
        self.last_was_custom = use_custom

        result = self._call(payload)

        self.stats = result.get("stats") or self.stats
        self.event = result.get("event") or ""
        self.rival_move = result.get("rivalMove") or ""

        chosen = result.get("chosenOption")
        # highlight the mapped option; otherwise clear for the next turn
        self.selected_option = chosen or None
        self.last_chosen_option = chosen or choice

        if result.get("explanation"):
            self.last_explanation = result["explanation"]
        elif use_custom:
            self.last_explanation = NO_EXPLANATION

        self.turn += 1
        self.history = [
            {"event": result.get("event"), "rivalMove": result.get("rivalMove"),
             "playerChoice": chosen or choice},
            *self.history[:HISTORY_SIZE - 1],
        ]

        if result.get("done"):
            self.done = True
            self.report = build_report(self.stats)
            logger.info("game finished with grade %s", self.report["overallGrade"])
        return result
