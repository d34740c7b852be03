from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_attempted': 0,
        'rooms_placed': 0,
        'tunnels_carved': 0,
        'passages_carved': 0,
        'wall_regions_pruned': 0,
        'room_regions_pruned': 0,
        'cave_rooms': 0,
        'isolated_rooms': 0,
        'vertices': 0,
        'triangles': 0,
        'outlines': 0,
        'wall_segments': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
