"""
Kandinsky API - HTTP host for an interactive Kandinsky composition
===================================================================
Drives one sketch session over a small JSON API: pointer input goes in,
rendered frames come out.
"""

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
import threading
import math
import logging
import time
import os
import io

from kandinsky import CompositionConfig, KandinskySketch

app = Flask(__name__)
CORS(app)

# Canvas settings
WIDTH = int(os.environ.get('KANDINSKY_WIDTH', 800))
HEIGHT = int(os.environ.get('KANDINSKY_HEIGHT', 600))
SEED = os.environ.get('KANDINSKY_SEED')

MAX_FRAMES_PER_TICK = 600
MAX_EXTENT = 4096
TOUCH_PHASES = ('start', 'move', 'end')

# Single session; every request holds the lock for its whole mutation
sketch = KandinskySketch(WIDTH, HEIGHT, seed=int(SEED) if SEED else None, config=CompositionConfig.from_env())
sketch_lock = threading.Lock()

# =============================================================================
# Helpers
# =============================================================================

class ValidationError(Exception):
    pass


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    return jsonify({'error': str(error), 'code': 'VALIDATION_ERROR'}), 400


@app.errorhandler(404)
def handle_not_found(error):
    return jsonify({'error': 'Endpoint not found', 'code': 'NOT_FOUND'}), 404


def get_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def number(data, key, required=True, default=None):
    """Read a numeric field from a request body"""
    if key not in data or data[key] is None:
        if required:
            raise ValidationError(f'{key} is required')
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'{key} must be a number')
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f'{key} must be finite')
    return value


def extent(data, key, default=None):
    value = number(data, key, required=default is None, default=default)
    if int(value) != value or not 0 < value <= MAX_EXTENT:
        raise ValidationError(f'{key} must be an integer between 1 and {MAX_EXTENT}')
    return int(value)


def timestamp(data):
    return number(data, 't', required=False, default=time.monotonic() * 1000)


# =============================================================================
# Session
# =============================================================================

@app.route('/api/v1/sketch/reset', methods=['POST'])
def reset_sketch():
    """Start a new composition, optionally with a fixed seed and extent."""
    data = get_body()
    seed = number(data, 'seed', required=False)
    if seed is not None and int(seed) != seed:
        raise ValidationError('seed must be an integer')

    with sketch_lock:
        width = extent(data, 'width', sketch.width)
        height = extent(data, 'height', sketch.height)
        sketch.reset(int(seed) if seed is not None else None, width, height)
        state = sketch.state()

    return jsonify({'success': True, 'state': state}), 201


@app.route('/api/v1/sketch/resize', methods=['POST'])
def resize_sketch():
    """Change the canvas extent; ink is rescaled or discarded per config"""
    data = get_body()
    width, height = extent(data, 'width'), extent(data, 'height')

    with sketch_lock:
        sketch.resize(width, height)
        state = sketch.state()

    return jsonify({'success': True, 'state': state})


@app.route('/api/v1/sketch/state', methods=['GET'])
def get_state():
    with sketch_lock:
        return jsonify({'state': sketch.state()})


# =============================================================================
# Pointer Input
# =============================================================================

@app.route('/api/v1/sketch/press', methods=['POST'])
def press():
    """Prime the previous pointer position for the next drag"""
    data = get_body()
    x, y = number(data, 'x'), number(data, 'y')

    with sketch_lock:
        sketch.press(x, y)

    return jsonify({'success': True})


@app.route('/api/v1/sketch/drag', methods=['POST'])
def drag():
    """Dispatch one drag event; responds with the spawned motif kind or null."""
    data = get_body()
    x, y = number(data, 'x'), number(data, 'y')
    px = number(data, 'px', required=False)
    py = number(data, 'py', required=False)
    t = timestamp(data)

    with sketch_lock:
        spawned = sketch.drag(x, y, px, py, t)
        finished = sketch.finished

    return jsonify({'spawned': spawned, 'finished': finished})


@app.route('/api/v1/sketch/touch', methods=['POST'])
def touch():
    """Touch start/move/end; moves are dispatched like drags"""
    data = get_body()
    phase = data.get('phase')
    if phase not in TOUCH_PHASES:
        raise ValidationError(f'phase must be one of: {", ".join(TOUCH_PHASES)}')
    x = number(data, 'x', required=phase != 'end', default=0)
    y = number(data, 'y', required=phase != 'end', default=0)
    touches = number(data, 'touches', required=False, default=1)
    t = timestamp(data)

    with sketch_lock:
        spawned = sketch.touch(phase, x, y, t, int(touches))
        finished = sketch.finished

    return jsonify({'spawned': spawned, 'finished': finished})


# =============================================================================
# Frames
# =============================================================================

@app.route('/api/v1/sketch/tick', methods=['POST'])
def tick():
    """Advance the frame loop"""
    data = get_body()
    frames = number(data, 'frames', required=False, default=1)
    if int(frames) != frames or not 1 <= frames <= MAX_FRAMES_PER_TICK:
        raise ValidationError(f'frames must be an integer between 1 and {MAX_FRAMES_PER_TICK}')

    with sketch_lock:
        frame_count = sketch.tick(int(frames))
        state = sketch.state()

    return jsonify({'success': True, 'frame_count': frame_count, 'state': state})


@app.route('/api/v1/sketch/frame', methods=['GET'])
def get_frame():
    """Current frame as a PNG image"""
    with sketch_lock:
        image_data = sketch.frame_png()
        seed = sketch.seed

    download = request.args.get('download') in ('1', 'true')
    return send_file(io.BytesIO(image_data), mimetype='image/png',
                     as_attachment=download, download_name=f'kandinsky-{seed}.png')


@app.route('/api/v1/sketch/frame.json', methods=['GET'])
def get_frame_json():
    with sketch_lock:
        return jsonify({
            'seed': sketch.seed,
            'frame_count': sketch.session.frame_count,
            'width': sketch.width,
            'height': sketch.height,
            'image_base64': sketch.frame_base64()
        })


@app.route('/api/v1', methods=['GET'])
@app.route('/', methods=['GET'])
def api_info():
    """API information"""
    return jsonify({
        'name': 'Kandinsky API',
        'version': '1.0.0',
        'description': 'Drag near the hidden anchors to grow a Kandinsky-style composition.',
        'endpoints': {
            'reset': 'POST /api/v1/sketch/reset',
            'press': 'POST /api/v1/sketch/press',
            'drag': 'POST /api/v1/sketch/drag',
            'touch': 'POST /api/v1/sketch/touch',
            'tick': 'POST /api/v1/sketch/tick',
            'resize': 'POST /api/v1/sketch/resize',
            'frame': 'GET /api/v1/sketch/frame',
            'frame_json': 'GET /api/v1/sketch/frame.json',
            'state': 'GET /api/v1/sketch/state'
        }
    })

# =============================================================================
# Run Server
# =============================================================================

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    print("""
    ╔═══════════════════════════════════════════════════════════╗
    ║                                                           ║
    ║   KANDINSKY API v1.0 - Interactive Composition Engine     ║
    ║                                                           ║
    ║   Server running at http://localhost:5000                 ║
    ║                                                           ║
    ╚═══════════════════════════════════════════════════════════╝
    """)
    app.run(host='0.0.0.0', port=5000, debug=True)
