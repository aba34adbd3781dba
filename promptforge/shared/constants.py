"""
#WHERE
    Imported by pipeline.py and every module: single source of truth
    for quality tiers, default durations and recursion ceilings.

#WHAT
    Centralised constants used across 3+ modules.  Edit here, not in
    individual module files.

#INPUT / #OUTPUT
    Pure constants: no I/O.
"""

# ── Mesh quality tiers ───────────────────────────────────────────────────

MESH_QUALITY_TIERS: dict[str, dict[str, int]] = {
    "low":    {"vertex_count": 5_000,   "texture_size": 512},
    "medium": {"vertex_count": 15_000,  "texture_size": 1024},
    "high":   {"vertex_count": 40_000,  "texture_size": 2048},
    "ultra":  {"vertex_count": 100_000, "texture_size": 4096},
}
DEFAULT_MESH_QUALITY: str = "medium"

# ── Scores ───────────────────────────────────────────────────────────────

SCORE_MIN: int = 0
SCORE_MAX: int = 10
BASE_COMPLEXITY: int = 2

# ── Geometry ─────────────────────────────────────────────────────────────

SPHERE_SEGMENTS: int = 32
BOX_SEGMENTS: int = 8
CYLINDER_SEGMENTS: int = 32
TORUS_RADIAL_SEGMENTS: int = 16
TORUS_TUBULAR_SEGMENTS: int = 100
TWIST_COUNT: int = 5

ORGANIC_MAX_DEPTH: int = 3      # branch recursion levels below the trunk
FRACTAL_MAX_DEPTH: int = 3
MAX_GEOMETRY_NODES: int = 512   # ceiling on merged sub-meshes per build
FRACTAL_MIN_SIZE: float = 0.1

HOLLOW_INNER_SCALE: float = 0.85

# ── Materials ────────────────────────────────────────────────────────────

DEFAULT_COLOR: str = "#ffffff"
DEFAULT_CHARACTER_COLOR: str = "#8b7355"

# ── Characters ───────────────────────────────────────────────────────────

DEFAULT_INTERACTION_RADIUS: float = 2.0
DEFAULT_FRICTION: float = 0.5
DEFAULT_RESTITUTION: float = 0.1
CHARACTER_BASE_MASS: dict[str, float] = {
    "humanoid": 70.0,
    "creature": 50.0,
}
FALLBACK_BASE_MASS: float = 20.0
SPECIAL_FEATURE_WARNING_THRESHOLD: int = 3

MAX_BONE_INFLUENCES: int = 4

# ── Animation ────────────────────────────────────────────────────────────

DEFAULT_ANIMATION_INTENSITY: float = 1.0
RUN_TIME_SCALE: float = 0.6
RUN_INTENSITY_SCALE: float = 1.5

# preset → (default duration in seconds, loops)
ANIMATION_DEFAULTS: dict[str, tuple[float, bool]] = {
    "idle":     (3.0,  True),
    "walk":     (1.2,  True),
    "run":      (0.72, True),
    "jump":     (1.0,  False),
    "wave":     (2.0,  False),
    "dance":    (4.0,  True),
    "attack":   (0.6,  False),
    "interact": (1.0,  False),
    "emote":    (1.2,  False),
    "custom":   (1.0,  True),
}
