"""
Kandinsky Session
=================
The single aggregate of mutable composition state, shared by the
dispatcher and the frame compositor.

Only those two write to it, and only from one thread of control.
reset() is the one place state is (re)initialised.
"""

import logging

from .anchors import AnchorField, vanishing_points
from .colors import generate_palette, generate_rich_palette
from .config import (CompositionConfig, SHAPE_SPEED_FLOOR, SLOWDOWN_FULL, SLOWDOWN_START,
                     map_range)

logger = logging.getLogger(__name__)


class SessionState:
    def __init__(self, width, height, rng, config=None):
        self.config = config or CompositionConfig()
        self.rng = rng
        self.width = width
        self.height = height
        self.reset()

    def reset(self):
        """Fresh counters, lists, palette, anchors and vanishing points"""
        config = self.config
        self.skeletons = []
        self.ornaments = []
        self.line_anims = []
        self.lattice_anims = []
        self.foreground_anims = []

        self.shape_counter = 0
        self.thick_stroke_count = 0
        self.lattices_completed = 0
        self.drag_count = 0
        self.composition_finished = False
        self.last_drag_time = None
        self.first_shape_colors = []
        self.frame_count = 0

        if config.palette_mode == 'rich':
            self.scheme, self.palette = 'rich', generate_rich_palette(self.rng)
        else:
            self.scheme, self.palette = generate_palette(self.rng)

        layout = {
            'random': lambda: AnchorField.scatter(self.rng, config.n_anchors, self.width, self.height,
                                                  config.trigger_dist),
            'grid': lambda: AnchorField.grid(config.n_anchors, self.width, self.height, config.trigger_dist),
        }
        self.anchors = layout[config.anchor_layout]()
        self.relative_vanishing_points = vanishing_points(self.rng, config.vanishing_mode)
        self.background_seed = self.rng.getrandbits(32)

        logger.info('Session reset: %dx%d, %s palette, %d anchors',
                    self.width, self.height, self.scheme, len(self.anchors))

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def base_unit(self):
        return min(self.width, self.height)

    @property
    def vanishing_points(self):
        return [(rx * self.width, ry * self.height) for rx, ry in self.relative_vanishing_points]

    @property
    def element_count(self):
        return (len(self.skeletons) + len(self.ornaments) + len(self.line_anims)
                + len(self.lattice_anims) + len(self.foreground_anims))

    @property
    def live_motifs(self):
        return self.line_anims + self.lattice_anims + self.foreground_anims

    def speed_modifier(self, floor=SHAPE_SPEED_FLOOR):
        """Global-load slowdown: busy compositions animate more slowly"""
        count = self.element_count
        if not self.config.slowdown or count <= SLOWDOWN_START:
            return 1.0
        return map_range(count, SLOWDOWN_START, SLOWDOWN_FULL, 1.0, floor, clamp=True)

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    def next_shape_index(self):
        self.shape_counter += 1
        return self.shape_counter

    def lattice_available(self):
        # in-flight lattices count against the cap so completions stay bounded
        return self.lattices_completed + len(self.lattice_anims) < self.config.lattice_cap

    def thick_stroke_available(self):
        return self.thick_stroke_count < self.config.thick_stroke_cap

    def record_lattice_completion(self):
        self.lattices_completed += 1
        logger.debug('Lattice completed (%d/%d)', self.lattices_completed, self.config.lattice_cap)

    def check_completion(self):
        """Set the terminal flag once the configured cap is reached"""
        if self.composition_finished:
            return True
        if self.config.cap_policy == 'drags':
            count, unit = self.drag_count, 'drags'
        else:
            count, unit = self.element_count, 'elements'
        if count >= self.config.cap_value:
            self.composition_finished = True
            logger.info('Composition finished after %d %s', count, unit)
        return self.composition_finished

    # -------------------------------------------------------------------------
    # Resize
    # -------------------------------------------------------------------------

    def resize(self, width, height):
        self.width = width
        self.height = height
        if self.config.resize_policy == 'reset':
            seed = self.background_seed
            self.reset()
            self.background_seed = seed
        else:
            self.anchors.relayout(width, height)

    def summary(self):
        return {
            'width': self.width,
            'height': self.height,
            'scheme': self.scheme,
            'palette': [c.hex for c in self.palette],
            'anchors': len(self.anchors),
            'skeletons': len(self.skeletons),
            'ornaments': len(self.ornaments),
            'line_anims': len(self.line_anims),
            'lattice_anims': len(self.lattice_anims),
            'foreground_anims': len(self.foreground_anims),
            'shape_counter': self.shape_counter,
            'thick_stroke_count': self.thick_stroke_count,
            'lattices_completed': self.lattices_completed,
            'drag_count': self.drag_count,
            'element_count': self.element_count,
            'frame_count': self.frame_count,
            'composition_finished': self.composition_finished,
        }
