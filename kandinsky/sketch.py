"""
Kandinsky Sketch
================
One interactive composition: session state, drag dispatch and the frame
compositor wired together behind a small host-facing surface.
"""

import logging
import random
import time

from .compositor import FrameCompositor
from .config import CompositionConfig
from .dispatch import Dispatcher, TouchTracker
from .session import SessionState

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


class KandinskySketch:
    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, seed=None, config=None):
        """
        Start a new composition.

        Args:
            width, height: Canvas extent in pixels
            seed: Seed for the session's random source; time-derived when omitted
            config: CompositionConfig, defaults to the stock variant

        Every random decision of the session draws from one generator, so
        a given seed and input sequence always produce the same frames.
        """
        self.config = config or CompositionConfig()
        self.width = width
        self.height = height
        self.reset(seed)

    def reset(self, seed=None, width=None, height=None):
        if seed is None:
            seed = int(time.time() * 1000) % 1000000
        self.seed = seed
        self.width = width or self.width
        self.height = height or self.height
        self.rng = random.Random(seed)

        self.session = SessionState(self.width, self.height, self.rng, self.config)
        self.dispatcher = Dispatcher(self.session)
        self.pointer = TouchTracker(self.dispatcher)
        self.compositor = FrameCompositor(self.session)
        logger.info('New sketch: seed %d', seed)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def press(self, x, y):
        self.pointer.press(x, y)

    def drag(self, x, y, px=None, py=None, t=None):
        """Mouse drag; previous coordinates default to the last pointer position"""
        if px is None or py is None:
            if self.pointer.previous is not None:
                px, py = self.pointer.previous
        kind = self.dispatcher.handle_drag(x, y, px, py, t)
        self.pointer.previous = (x, y)
        return kind

    def touch(self, phase, x, y, t=None, touches=1):
        handlers = {
            'start': lambda: self.pointer.press(x, y),
            'move': lambda: self.pointer.move(x, y, t, touches),
            'end': self.pointer.release,
        }
        if phase not in handlers:
            raise ValueError(f'Unknown touch phase: {phase}')
        return handlers[phase]()

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def tick(self, frames=1):
        for _ in range(frames):
            self.compositor.tick()
        return self.session.frame_count

    def resize(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError('Canvas extent must be positive')
        self.width, self.height = width, height
        self.compositor.resize(width, height)

    def frame_png(self):
        return self.compositor.snapshot().to_png()

    def frame_base64(self):
        return self.compositor.snapshot().to_base64()

    @property
    def finished(self):
        return self.session.composition_finished

    def state(self):
        summary = self.session.summary()
        summary['seed'] = self.seed
        return summary


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    sketch = KandinskySketch(seed=42)
    rng = random.Random(7)
    clock = 0
    while not sketch.finished:
        anchor = sketch.session.anchors.choice(rng)
        clock += 400
        sketch.drag(anchor.x + 3, anchor.y - 2, anchor.x - 10, anchor.y + 5, t=clock)
        sketch.tick(30)
    sketch.tick(60)
    data = sketch.frame_base64()
    print(f'seed 42: {sketch.state()["element_count"]} elements, {len(data)} bytes of base64 data')
