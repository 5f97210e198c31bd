"""
Analysis HTTP Service

Flask application exposing the disabled-code analysis so the same review
payload can be produced outside of the CI workflow.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError

from . import __version__
from .api import ReviewTrainerAPI
from .models.changed_file import AnalyzeRequest


logger = logging.getLogger(__name__)


def create_app(reviewer_api: Optional[ReviewTrainerAPI] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        reviewer_api: ReviewTrainerAPI instance (default: built from environment config)
    """
    app = Flask(__name__)
    api = reviewer_api or ReviewTrainerAPI()

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'code-review-trainer',
            'version': __version__
        })

    @app.route('/api/v1/analyze', methods=['POST'])
    def analyze():
        """Analyze files and return the review payload."""
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Request body must be JSON', 'status': 'failed'}), 400

        try:
            analyze_request = AnalyzeRequest.model_validate(data)
        except ValidationError as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 400

        payload = api.review(analyze_request.to_changed_files(), tests_passed=analyze_request.tests_passed)
        logger.info(f"Analyzed {len(analyze_request.files)} files: {payload.verdict.value}")

        response = payload.to_dict()
        response['status'] = 'completed'
        return jsonify(response)

    return app
