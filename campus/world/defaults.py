from __future__ import annotations

from typing import Any, Dict

DEFAULT_CAMPUS_WIDTH = 3200
DEFAULT_CAMPUS_HEIGHT = 2000
DEFAULT_SPAWN = (1600, 1000)
DEFAULT_INTERIOR_WIDTH = 1100
DEFAULT_INTERIOR_HEIGHT = 700

# Used when no campus file is present or it cannot be parsed.
DEFAULT_LAYOUT: Dict[str, Any] = {
    "width": DEFAULT_CAMPUS_WIDTH,
    "height": DEFAULT_CAMPUS_HEIGHT,
    "spawn": {"x": DEFAULT_SPAWN[0], "y": DEFAULT_SPAWN[1]},
    "obstacles": [
        {"x": 400, "y": 300, "w": 520, "h": 320, "label": "Library"},
        {"x": 2200, "y": 300, "w": 600, "h": 360, "label": "Gymnasium"},
        {"x": 400, "y": 1350, "w": 480, "h": 300, "label": "Cafeteria"},
        {"x": 2300, "y": 1400, "w": 420, "h": 280, "label": "Science Hall"},
        {"x": 1450, "y": 1600, "w": 300, "h": 60, "label": "Fountain", "solid": False},
    ],
    "rooms": [
        {
            "id": "library",
            "name": "Library",
            "enter": {"x": 610, "y": 620, "w": 100, "h": 40},
            "interior": {
                "w": 1100,
                "h": 700,
                "objects": [
                    {"type": "shelf", "x": 100, "y": 80, "w": 400, "h": 40},
                    {"type": "shelf", "x": 600, "y": 80, "w": 400, "h": 40},
                ],
            },
            "subrooms": [
                {
                    "id": "study",
                    "name": "Quiet Study",
                    "interior": {"w": 600, "h": 400},
                },
                {
                    "id": "archive",
                    "name": "Archive",
                    "interior": {"w": 500, "h": 500},
                },
            ],
        },
        {
            "id": "gym",
            "name": "Gymnasium",
            "enter": {"x": 2450, "y": 660, "w": 100, "h": 40},
            "interior": {
                "w": 1400,
                "h": 800,
                "spawn": {"x": 700, "y": 700},
                "objects": [
                    {"type": "hoop", "x": 40, "y": 380},
                    {"type": "hoop", "x": 1360, "y": 380},
                ],
            },
            "subrooms": [
                {
                    "id": "locker",
                    "name": "Locker Room",
                    "interior": {"w": 500, "h": 400},
                },
            ],
        },
        {
            "id": "cafeteria",
            "name": "Cafeteria",
            "enter": {"x": 590, "y": 1310, "w": 100, "h": 40},
            "interior": {"w": 1000, "h": 650},
        },
        {
            "id": "science",
            "name": "Science Hall",
            "enter": {"x": 2460, "y": 1360, "w": 100, "h": 40},
            "interior": {"w": 1100, "h": 700},
            "subrooms": [
                {"id": "lab", "name": "Chemistry Lab", "interior": {"w": 700, "h": 500}},
            ],
        },
    ],
}
