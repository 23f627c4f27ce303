"""Definición de endpoints de la API REST de Sudojo.

Un objeto inmutable por cliente asocia cada operación lógica con su ruta. Las
rutas con parámetros son métodos; se espera que quien llama haya validado los
identificadores (ver `core.validators`).
"""

from __future__ import annotations

from dataclasses import dataclass

API_PREFIX = "/api/v1"


@dataclass(frozen=True)
class Endpoints:
    health: str = "/"

    levels: str = f"{API_PREFIX}/levels"
    techniques: str = f"{API_PREFIX}/techniques"
    learning: str = f"{API_PREFIX}/learning"

    boards: str = f"{API_PREFIX}/boards"
    boards_random: str = f"{API_PREFIX}/boards/random"
    boards_counts: str = f"{API_PREFIX}/boards/counts"

    dailies: str = f"{API_PREFIX}/dailies"
    dailies_random: str = f"{API_PREFIX}/dailies/random"
    dailies_today: str = f"{API_PREFIX}/dailies/today"

    challenges: str = f"{API_PREFIX}/challenges"
    challenges_random: str = f"{API_PREFIX}/challenges/random"

    solver_solve: str = f"{API_PREFIX}/solver/solve"
    solver_validate: str = f"{API_PREFIX}/solver/validate"
    solver_generate: str = f"{API_PREFIX}/solver/generate"

    practices: str = f"{API_PREFIX}/practices"
    practices_counts: str = f"{API_PREFIX}/practices/counts"

    examples: str = f"{API_PREFIX}/examples"
    examples_counts: str = f"{API_PREFIX}/examples/counts"

    play_start: str = f"{API_PREFIX}/play/start"
    play_finish: str = f"{API_PREFIX}/play/finish"

    gamification_stats: str = f"{API_PREFIX}/gamification/stats"
    gamification_badges: str = f"{API_PREFIX}/gamification/badges"
    gamification_history: str = f"{API_PREFIX}/gamification/history"

    def level(self, level: int) -> str:
        return f"{self.levels}/{level}"

    def technique(self, technique: int) -> str:
        return f"{self.techniques}/{technique}"

    def learning_item(self, uuid: str) -> str:
        return f"{self.learning}/{uuid}"

    def board(self, uuid: str) -> str:
        return f"{self.boards}/{uuid}"

    def daily(self, uuid: str) -> str:
        return f"{self.dailies}/{uuid}"

    def daily_by_date(self, date: str) -> str:
        return f"{self.dailies}/date/{date}"

    def challenge(self, uuid: str) -> str:
        return f"{self.challenges}/{uuid}"

    def user_subscriptions(self, user_id: str) -> str:
        return f"{API_PREFIX}/users/{user_id}/subscriptions"

    def practice_random(self, technique: int) -> str:
        return f"{self.practices}/technique/{technique}/random"


ENDPOINTS = Endpoints()
