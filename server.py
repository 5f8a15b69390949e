from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
import os

from pydantic import ValidationError

from config import DetectionConfig
from errors import TLCError
from image_io import load_image
from output import spots_to_records
from processing import detect_spots, write_annotated
from schemas import BandInfo, DetectRequest, DetectResponse, ValidateRequest, ValidateResponse
from validity import dark_fraction, is_plate_valid

# Set up logging
base_dir = os.path.dirname(os.path.abspath(__file__))
log_dir = os.path.join(base_dir, 'logs')
os.makedirs(log_dir, exist_ok=True)
log_file = os.path.join(log_dir, 'server.log')
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file),
        logging.StreamHandler()  # Also log to console
    ]
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for Flutter app

# Replaced by cli/tests with a config loaded from JSON
app.config['DETECTION_CONFIG'] = DetectionConfig()


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint"""
    return jsonify({'status': 'ok', 'message': 'Server is running'}), 200


@app.route('/api/detect', methods=['POST'])
def detect():
    """Detect spots on a plate image and optionally write the annotated frame back"""
    try:
        detect_request = DetectRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.error(f"Invalid detect request: {e}")
        return jsonify({'error': str(e)}), 400

    logger.info(f"Received detect request: {detect_request.model_dump()}")
    result = detect_spots(
        detect_request.path,
        baseline_y=detect_request.baseline_y,
        topline_y=detect_request.topline_y,
        config=app.config['DETECTION_CONFIG'],
    )

    success = result.success
    if success and detect_request.write_annotated:
        success = write_annotated(result, detect_request.path)

    response = DetectResponse(success=success, error=result.error)
    if success:
        response.spots = spots_to_records(result.spots)
        response.spot_count = len(result.spots)
        if result.band is not None:
            response.band = BandInfo(topline_y=result.band.topline_y, baseline_y=result.band.baseline_y)
    elif response.error is None:
        response.error = 'Failed to write annotated image'

    return jsonify(response.model_dump(mode='json')), 200


@app.route('/api/validate', methods=['POST'])
def validate_plate():
    """Run only the near-black plate validity check"""
    try:
        validate_request = ValidateRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400

    config = app.config['DETECTION_CONFIG']
    try:
        image = load_image(validate_request.path)
    except TLCError as e:
        logger.error(f"Error: {e}")
        return jsonify(ValidateResponse(valid=False, error=str(e)).model_dump(mode='json')), 200

    response = ValidateResponse(
        valid=is_plate_valid(image, config.dark_threshold, config.max_dark_fraction),
        dark_fraction=dark_fraction(image, config.dark_threshold),
    )
    return jsonify(response.model_dump(mode='json')), 200


def run(host: str = '127.0.0.1', port: int = 5000, config: DetectionConfig = None):
    if config is not None:
        app.config['DETECTION_CONFIG'] = config
    logger.info(f"Starting TLC spot server on {host}:{port}")
    app.run(host=host, port=port, debug=False, threaded=True)


if __name__ == '__main__':
    run()
