"""
Kandinsky Frame Compositor
==========================
Owns the layered surfaces and produces one RGBA frame per tick.

Stacking order: background, ink, anchor markers, shapes (skeletons
then ornaments), foreground ink. Live motifs are stepped after the frame
is assembled, so their increments show up on the next one.
"""

import logging

from .background import render_background
from .colors import Color
from .surface import Surface

logger = logging.getLogger(__name__)

ANCHOR_MARKER = Color(0, 100, 50, 0.5)


class FrameCompositor:
    def __init__(self, session):
        self.session = session
        self.reset()

    def reset(self):
        """Fresh background for the current seed and empty ink layers"""
        session = self.session
        self.background = self._render_background()
        self.ink = Surface(session.width, session.height)
        self.foreground = Surface(session.width, session.height)
        self.frame = None

    def _render_background(self):
        session = self.session
        config = session.config
        return render_background(session.width, session.height, session.background_seed,
                                 config.background_mode, config.splotch_layers, config.bold_splotches)

    @property
    def halted(self):
        return self.session.composition_finished and self.session.config.halt_on_finish

    # -------------------------------------------------------------------------
    # Frame loop
    # -------------------------------------------------------------------------

    def render(self, speed_modifier=None):
        session = self.session
        if speed_modifier is None:
            speed_modifier = 0.0 if self.halted else session.speed_modifier()

        frame = self.background.copy()
        frame.composite(self.ink)

        radius = session.config.anchor_vis_radius
        if radius > 0:
            for anchor in session.anchors:
                frame.ellipse(anchor.position, radius, fill=ANCHOR_MARKER)

        for shape in session.skeletons + session.ornaments:
            shape.display(frame, speed_modifier)

        frame.composite(self.foreground)
        self.frame = frame
        return frame

    def tick(self):
        """Render one frame, then advance every live motif by one step"""
        session = self.session
        frame = self.render()
        if not self.halted:
            self.advance(session.line_anims, self.ink)
            self.advance(session.lattice_anims, self.ink)
            self.advance(session.foreground_anims, self.foreground)
            session.check_completion()
        session.frame_count += 1
        return frame

    @staticmethod
    def advance(anims, surface):
        # reverse order so removal does not shift pending entries
        for i in range(len(anims) - 1, -1, -1):
            if not anims[i].step(surface):
                del anims[i]

    def snapshot(self):
        """The last frame, rendered without easing progress if none exists yet"""
        if self.frame is None:
            return self.render(speed_modifier=0.0)
        return self.frame

    # -------------------------------------------------------------------------
    # Resize
    # -------------------------------------------------------------------------

    def resize(self, width, height):
        session = self.session
        ink, foreground = self.ink, self.foreground
        session.resize(width, height)
        self.background = self._render_background()
        if session.config.resize_policy == 'preserve':
            self.ink = ink.resized(width, height)
            self.foreground = foreground.resized(width, height)
        else:
            self.ink = Surface(width, height)
            self.foreground = Surface(width, height)
        self.frame = None
        logger.info('Resized to %dx%d (%s)', width, height, session.config.resize_policy)
