# Cell occupancy constants centralized for modular imports
OPEN = 0
SOLID = 1

# ASCII rendering (CLI / JSON grid rows)
CHAR_SOLID = "#"
CHAR_OPEN = "."
CHAR_ROOM = "R"  # protected (room interior) open cell

# Semantic room tags
ENTRANCE = "entrance"
TREASURE = "treasure"
BOSS = "boss"
SHRINE = "shrine"
NORMAL = "normal"

ROOM_TAGS = (ENTRANCE, TREASURE, BOSS, SHRINE, NORMAL)

__all__ = [
    "OPEN",
    "SOLID",
    "CHAR_SOLID",
    "CHAR_OPEN",
    "CHAR_ROOM",
    "ENTRANCE",
    "TREASURE",
    "BOSS",
    "SHRINE",
    "NORMAL",
    "ROOM_TAGS",
]
