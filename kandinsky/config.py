"""
Kandinsky Configuration
=======================
Build-time constants and the swappable composition variant.

The constants mirror the values the sketch has always shipped with. The
numbers that differ between session variants (dispatch odds, size maps,
cap policy) live on CompositionConfig so a host can pick one.
"""

import os
from dataclasses import dataclass, fields, replace

# =============================================================================
# Constants
# =============================================================================

N_ANCHORS = 300
TRIGGER_DIST = 25
ANCHOR_VIS_RADIUS = 0

LINE_STEPS = 900
ARC_STEPS = 540
BEZ_STEPS = 360
SPIRAL_STEPS = 100

SHAPE_SPEED_MIN = 0.001
SHAPE_SPEED_MAX = 0.004

DEBOUNCE_MS = 300

THICK_STROKE_CAP = 2
LATTICE_CAP = 2
DRAG_CAP = 20
ELEMENT_CAP = 50

LATTICE_DELAY = 12
SMALL_SCREEN = 600

# Global-load slowdown: element counts between these map speed 1.0 -> floor
SLOWDOWN_START = 16
SLOWDOWN_FULL = 33
SHAPE_SPEED_FLOOR = 0.1
SPIRAL_SPEED_FLOOR = 0.4

SKELETON_COUNT = 2

CAP_POLICIES = ('drags', 'elements')
SECOND_COLOR_MODES = ('hue_shift', 'exclude')
ORNAMENT_COLOR_MODES = ('rogue', 'palette')
PALETTE_MODES = ('harmony', 'rich')
BACKGROUND_MODES = ('noise', 'watercolor')
ANCHOR_LAYOUTS = ('random', 'grid')
VANISHING_MODES = ('fixed', 'random')
RESIZE_POLICIES = ('preserve', 'reset')

# Order matters: a capped branch falls through to the next entry.
DEFAULT_DISPATCH_WEIGHTS = (
    ('line', 0.35),
    ('arc', 0.10),
    ('bezier', 0.05),
    ('lattice', 0.05),
    ('spiral', 0.05),
)


def map_range(value, start1, stop1, start2, stop2, clamp=False):
    """Linearly re-map value from one range to another"""
    if stop1 == start1:
        return start2
    out = start2 + (stop2 - start2) * ((value - start1) / (stop1 - start1))
    if clamp:
        lo, hi = min(start2, stop2), max(start2, stop2)
        out = max(lo, min(hi, out))
    return out


# =============================================================================
# Composition variant
# =============================================================================

@dataclass
class CompositionConfig:
    """Every knob that differs between observed session variants."""

    n_anchors: int = N_ANCHORS
    trigger_dist: float = TRIGGER_DIST
    anchor_vis_radius: float = ANCHOR_VIS_RADIUS
    anchor_layout: str = 'random'

    line_steps: int = LINE_STEPS
    arc_steps: int = ARC_STEPS
    bezier_steps: int = BEZ_STEPS
    spiral_steps: int = SPIRAL_STEPS
    lattice_delay: int = LATTICE_DELAY

    debounce_ms: float = DEBOUNCE_MS

    thick_stroke_chance: float = 0.2
    thick_stroke_cap: int = THICK_STROKE_CAP
    lattice_cap: int = LATTICE_CAP
    foreground_chance: float = 0.3
    perspective_chance: float = 0.4
    dispatch_weights: tuple = DEFAULT_DISPATCH_WEIGHTS

    cap_policy: str = 'drags'
    cap_value: int = DRAG_CAP

    skeleton_scale: tuple = (1.8, 2.5)
    ornament_scale: tuple = (1.2, 0.5)
    skeleton_tangent: bool = False
    second_color_mode: str = 'hue_shift'
    ornament_color_mode: str = 'rogue'

    palette_mode: str = 'harmony'
    background_mode: str = 'watercolor'
    splotch_layers: int = 150
    bold_splotches: int = 0
    vanishing_mode: str = 'fixed'
    resize_policy: str = 'preserve'

    slowdown: bool = True
    halt_on_finish: bool = True

    def __post_init__(self):
        for name in ('line_steps', 'arc_steps', 'bezier_steps', 'spiral_steps'):
            if getattr(self, name) <= 0:
                raise ValueError(f'{name} must be positive')
        if self.n_anchors <= 0:
            raise ValueError('n_anchors must be positive')
        if self.lattice_delay < 0:
            raise ValueError('lattice_delay must not be negative')
        if self.cap_value <= 0:
            raise ValueError('cap_value must be positive')

        choices = {
            'cap_policy': CAP_POLICIES,
            'second_color_mode': SECOND_COLOR_MODES,
            'ornament_color_mode': ORNAMENT_COLOR_MODES,
            'palette_mode': PALETTE_MODES,
            'background_mode': BACKGROUND_MODES,
            'anchor_layout': ANCHOR_LAYOUTS,
            'vanishing_mode': VANISHING_MODES,
            'resize_policy': RESIZE_POLICIES,
        }
        for name, allowed in choices.items():
            if getattr(self, name) not in allowed:
                raise ValueError(f'{name} must be one of: {", ".join(allowed)}')

        total = sum(weight for _, weight in self.dispatch_weights)
        if total > 1.0 + 1e-9 or any(weight < 0 for _, weight in self.dispatch_weights):
            raise ValueError('dispatch weights must be non-negative and sum to at most 1')

    def dispatch_table(self):
        """Cumulative (cutoff, kind) pairs; anything above the last cutoff is an ornament"""
        table = []
        cumulative = 0.0
        for kind, weight in self.dispatch_weights:
            cumulative += weight
            table.append((cumulative, kind))
        return table

    def with_overrides(self, **overrides):
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from KANDINSKY_* environment variables"""
        environ = os.environ if environ is None else environ
        known = {f.name: f for f in fields(cls)}
        overrides = {}
        for name in ('cap_policy', 'background_mode', 'palette_mode',
                     'anchor_layout', 'vanishing_mode', 'resize_policy'):
            value = environ.get(f'KANDINSKY_{name.upper()}')
            if value:
                overrides[name] = value
        for name in ('cap_value', 'n_anchors', 'splotch_layers'):
            value = environ.get(f'KANDINSKY_{name.upper()}')
            if value:
                overrides[name] = int(value)
        if 'cap_policy' in overrides and 'cap_value' not in overrides:
            overrides['cap_value'] = ELEMENT_CAP if overrides['cap_policy'] == 'elements' else DRAG_CAP
        return cls(**{k: v for k, v in overrides.items() if k in known})
