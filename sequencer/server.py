"""
HTTP API server for the sequencer.

This module provides a Flask-based REST API that receives job sets
and returns the schedules produced by the sequencing algorithms.
"""

from flask import Flask, request, jsonify
from datetime import datetime
from typing import Dict, Any, List
import logging

from . import __version__
from .types import Algorithm, JobRecord, SequencingResult
from .algorithm import DEFAULT_PERMUTATION_LIMIT, calculate_schedule_metrics
from .loader import InstanceFormatError, parse_instance
from .runner import compare_algorithms, default_algorithms, run_algorithm


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


class RequestError(ValueError):
    """The request body cannot be turned into a sequencing run."""


def parse_jobs(data: Dict[str, Any]) -> List[JobRecord]:
    """
    Read the job set from a request body.

    Either "instance" holds instance text, or "jobs" holds a list of
    objects with release, processing and delivery. Missing ids are
    assigned from the list position, starting at 1.
    """
    if 'instance' in data:
        try:
            return parse_instance(str(data['instance']))
        except InstanceFormatError as e:
            raise RequestError(f'Invalid instance: {e}')

    job_list = data.get('jobs', [])
    if not isinstance(job_list, list):
        raise RequestError('"jobs" must be a list')

    jobs = []
    for position, job_data in enumerate(job_list, start=1):
        try:
            jobs.append(JobRecord(
                id=int(job_data.get('id', position)),
                release=int(job_data['release']),
                processing=int(job_data['processing']),
                delivery=int(job_data['delivery'])
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RequestError(f'Invalid job data: {e}')

    if len({job.id for job in jobs}) != len(jobs):
        raise RequestError('Job ids must be unique')
    return jobs


def parse_algorithm(name: Any) -> Algorithm:
    try:
        return Algorithm(name)
    except ValueError:
        raise RequestError(f'Unknown algorithm: {name}')


def result_to_dict(result: SequencingResult) -> Dict[str, Any]:
    return {
        'algorithm': result.algorithm.value,
        'value': result.value,
        'order': result.schedule.job_order(),
        'elapsed_ms': result.elapsed_ms,
    }


def create_app(config: Dict[str, Any] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)

    # Default configuration
    app.config.update({
        'TESTING': False,
        'MAX_JOBS': 10000,
        'MAX_TOTAL_PROCESSING': 1000000,
        'PERMUTATION_LIMIT': DEFAULT_PERMUTATION_LIMIT,
        'DEFAULT_ALGORITHM': Algorithm.SCHRAGE.value,
    })

    # Apply custom config
    if config:
        app.config.update(config)

    def read_request():
        data = request.get_json(silent=True)
        if not data:
            raise RequestError('Empty request body')
        if not isinstance(data, dict):
            raise RequestError('Request body must be a JSON object')
        jobs = parse_jobs(data)
        if len(jobs) > app.config['MAX_JOBS']:
            raise RequestError(
                f"Too many jobs: {len(jobs)} (limit {app.config['MAX_JOBS']})"
            )
        total = sum(job.processing for job in jobs)
        if total > app.config['MAX_TOTAL_PROCESSING']:
            raise RequestError(
                f"Total processing too large: {total} (limit {app.config['MAX_TOTAL_PROCESSING']})"
            )
        return data, jobs

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'rpq-sequencer',
            'version': __version__,
            'timestamp': datetime.utcnow().isoformat()
        })

    @app.route('/sequence', methods=['POST'])
    def sequence_jobs():
        """
        Sequence jobs with one algorithm.

        Request body:
        {
            "algorithm": "schrage_preemptive",
            "jobs": [
                {"release": 0, "processing": 5, "delivery": 1},
                {"release": 2, "processing": 2, "delivery": 10}
            ]
        }

        Response:
        {
            "type": "sequence_response",
            "algorithm": "schrage_preemptive",
            "value": 14,
            "order": [2, 1],
            "segments": [
                {"job_id": 1, "amount": 2, "delivery_charged": false},
                {"job_id": 2, "amount": 2, "delivery_charged": true},
                {"job_id": 1, "amount": 3, "delivery_charged": true}
            ],
            "metrics": {...}
        }
        """
        try:
            data, jobs = read_request()
            algorithm = parse_algorithm(data.get('algorithm', app.config['DEFAULT_ALGORITHM']))
            result = run_algorithm(algorithm, jobs, app.config['PERMUTATION_LIMIT'])
        except ValueError as e:
            logger.error(f"Rejected sequencing request: {e}")
            return jsonify({'error': str(e)}), 400

        metrics = calculate_schedule_metrics(result.schedule, jobs)
        logger.info(f"Sequenced {len(jobs)} jobs with {algorithm.value}")
        logger.info(f"Metrics: {metrics}")

        response = result_to_dict(result)
        response.update({
            'type': 'sequence_response',
            'segments': [
                {
                    'job_id': s.job_id,
                    'amount': s.amount,
                    'delivery_charged': s.delivery_charged
                }
                for s in result.schedule
            ],
            'metrics': metrics
        })
        return jsonify(response), 200

    @app.route('/compare', methods=['POST'])
    def compare():
        """
        Run several algorithms over the same jobs.

        The body holds "jobs" or "instance" as for /sequence, and an
        optional "algorithms" list. By default every algorithm runs,
        the permutation search only within PERMUTATION_LIMIT.
        """
        try:
            data, jobs = read_request()
            limit = app.config['PERMUTATION_LIMIT']
            if 'algorithms' in data:
                if not isinstance(data['algorithms'], list):
                    raise RequestError('"algorithms" must be a list')
                algorithms = [parse_algorithm(name) for name in data['algorithms']]
            else:
                algorithms = default_algorithms(len(jobs), limit)
            results = compare_algorithms(jobs, algorithms, limit)
        except ValueError as e:
            logger.error(f"Rejected comparison request: {e}")
            return jsonify({'error': str(e)}), 400

        best = min((r.value for r in results), default=0)
        return jsonify({
            'type': 'compare_response',
            'results': [result_to_dict(r) for r in results],
            'best_value': best
        }), 200

    @app.route('/algorithms', methods=['GET'])
    def get_algorithms():
        """List available algorithms and limits."""
        return jsonify({
            'algorithms': [a.value for a in Algorithm],
            'default_algorithm': app.config['DEFAULT_ALGORITHM'],
            'permutation_limit': app.config['PERMUTATION_LIMIT'],
            'max_jobs': app.config['MAX_JOBS'],
            'max_total_processing': app.config['MAX_TOTAL_PROCESSING']
        })

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


def run_server(host: str = '0.0.0.0', port: int = 8001, debug: bool = False):
    """
    Run the sequencer HTTP server.

    Args:
        host: Host to bind to
        port: Port to listen on
        debug: Enable debug mode
    """
    logger.info("=" * 50)
    logger.info("  RPQ Sequencer Server")
    logger.info("=" * 50)
    logger.info("")
    logger.info(f"Starting server on {host}:{port}")
    logger.info("")
    logger.info("Endpoints:")
    logger.info(f"  POST {host}:{port}/sequence   - Sequence jobs")
    logger.info(f"  POST {host}:{port}/compare    - Compare algorithms")
    logger.info(f"  GET  {host}:{port}/algorithms - List algorithms")
    logger.info(f"  GET  {host}:{port}/health     - Health check")
    logger.info("")

    app = create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_server()
