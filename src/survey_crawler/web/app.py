"""
Survey Crawler Web API.

A Flask-based job API for the survey crawler. Each job runs one survey
in a background thread; its progress log can be polled or streamed via
Server-Sent Events, and a running job can be stopped.

Run with:
    python -m survey_crawler web --port 5000

Or with Flask:
    flask --app survey_crawler.web.app run --port 5000
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import time
import uuid
from datetime import datetime
from threading import Thread
from typing import TYPE_CHECKING

from flask import Flask, request, jsonify, Response, stream_with_context

from ..models.crawl_result import CrawlResult, RunState
from ..models.events import LogEvent
from ..navigation.traversal import validate_survey_url

if TYPE_CHECKING:
    from ..main import SurveyCrawler

logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)
app.secret_key = os.environ.get('SECRET_KEY') or os.urandom(32).hex()

# Store for active jobs and their progress
jobs: dict[str, dict] = {}

# Crawlers of running jobs, kept so they can be stopped
crawlers: dict[str, "SurveyCrawler"] = {}

# Maximum number of finished jobs to keep in memory
MAX_FINISHED_JOBS = 100

# Seconds between SSE polls of a job
STREAM_POLL_INTERVAL = 0.5

FINISHED_STATUSES = ('completed', 'failed', 'stopped')


def get_crawler():
    """Lazy import of SurveyCrawler to avoid circular imports."""
    from ..main import SurveyCrawler
    return SurveyCrawler


# =============================================================================
# ROUTES
# =============================================================================

@app.route('/api/health')
def health():
    """Health check endpoint."""
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now().isoformat(),
    })


@app.route('/api/start', methods=['POST'])
def start_survey():
    """
    Start a survey crawl job.

    Expects JSON with 'survey_url'. Returns a job_id for tracking progress.
    """
    data = request.get_json(silent=True) or {}
    survey_url = data.get('survey_url')

    if not survey_url:
        return jsonify({'error': 'survey_url is required'}), 400
    try:
        survey_url = validate_survey_url(survey_url)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    job_id = str(uuid.uuid4())[:8]
    jobs[job_id] = {
        'status': 'pending',
        'survey_url': survey_url,
        'progress': [],
        'result': None,
        'error': None,
        'created_at': datetime.now().isoformat(),
    }

    thread = Thread(target=run_survey_job, args=(job_id, survey_url))
    thread.daemon = True
    thread.start()

    return jsonify({
        'job_id': job_id,
        'status': 'started',
        'message': 'Survey crawl job started',
    })


@app.route('/api/stop/<job_id>', methods=['POST'])
def stop_survey(job_id: str):
    """Ask a running job to stop before its next request."""
    if job_id not in jobs:
        return jsonify({'error': 'Job not found'}), 404

    job = jobs[job_id]
    if job['status'] in FINISHED_STATUSES:
        return jsonify({'job_id': job_id, 'status': job['status'], 'message': 'Job already finished'})

    crawler = crawlers.get(job_id)
    if crawler is not None:
        crawler.request_stop()
    job['stop_requested'] = True

    return jsonify({
        'job_id': job_id,
        'status': job['status'],
        'message': 'Stop requested',
    })


@app.route('/api/status/<job_id>')
def job_status(job_id: str):
    """Get the status of a job."""
    if job_id not in jobs:
        return jsonify({'error': 'Job not found'}), 404

    job = jobs[job_id]
    return jsonify({
        'job_id': job_id,
        'status': job['status'],
        'progress': job['progress'],
        'result': job['result'],
        'error': job['error'],
    })


@app.route('/api/stream/<job_id>')
def stream_progress(job_id: str):
    """Stream job progress via Server-Sent Events."""
    if job_id not in jobs:
        return jsonify({'error': 'Job not found'}), 404

    def generate():
        last_progress_count = 0

        while True:
            job = jobs.get(job_id)
            if not job:
                yield f"data: {json.dumps({'type': 'error', 'message': 'Job not found'})}\n\n"
                break

            current_progress = job['progress']
            if len(current_progress) > last_progress_count:
                for entry in current_progress[last_progress_count:]:
                    yield f"data: {json.dumps({'type': 'progress', **entry})}\n\n"
                last_progress_count = len(current_progress)

            if job['status'] in FINISHED_STATUSES:
                result_data = {
                    'type': 'complete',
                    'status': job['status'],
                    'result': job['result'],
                    'error': job['error'],
                }
                yield f"data: {json.dumps(result_data)}\n\n"
                break

            time.sleep(STREAM_POLL_INTERVAL)

    return Response(
        stream_with_context(generate()),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        }
    )


# =============================================================================
# BACKGROUND JOB RUNNERS
# =============================================================================

def update_job_progress(job_id: str, event: LogEvent):
    """Add a progress event to a job."""
    if job_id in jobs:
        jobs[job_id]['progress'].append({
            'time': event.timestamp.strftime('%H:%M:%S'),
            'severity': event.severity.value,
            'message': event.message,
        })
        logger.info(f"[{job_id}] {event.message}")


def _cleanup_old_jobs():
    """Remove oldest finished jobs when the limit is exceeded."""
    finished = [
        (jid, j) for jid, j in jobs.items()
        if j['status'] in FINISHED_STATUSES
    ]
    if len(finished) > MAX_FINISHED_JOBS:
        finished.sort(key=lambda x: x[1].get('created_at', ''))
        for jid, _ in finished[:len(finished) - MAX_FINISHED_JOBS]:
            del jobs[jid]


def _finalize_job(job_id: str, result: CrawlResult):
    """Process a CrawlResult and update the job dict."""
    job = jobs[job_id]
    job['result'] = result.to_summary()
    if result.state is RunState.COMPLETED:
        job['status'] = 'completed'
    elif result.state is RunState.STOPPED:
        job['status'] = 'stopped'
    else:
        job['status'] = 'failed'
        job['error'] = result.error_message
    _cleanup_old_jobs()


def run_survey_job(job_id: str, survey_url: str):
    """Run a survey crawl in a background thread."""
    try:
        jobs[job_id]['status'] = 'running'

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        try:
            SurveyCrawler = get_crawler()
            crawler = SurveyCrawler(
                verbose=False,
                progress_callback=lambda event: update_job_progress(job_id, event),
            )
            crawlers[job_id] = crawler
            if jobs[job_id].get('stop_requested'):
                crawler.request_stop()

            result = loop.run_until_complete(crawler.run(survey_url))
            _finalize_job(job_id, result)
        finally:
            crawlers.pop(job_id, None)
            loop.close()

    except Exception as e:
        logger.exception(f"Error in job {job_id}")
        jobs[job_id]['status'] = 'failed'
        jobs[job_id]['error'] = str(e)


# =============================================================================
# MAIN
# =============================================================================

if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    print(f"""
╔═══════════════════════════════════════════════════════════╗
║           SURVEY CRAWLER WEB API                          ║
╠═══════════════════════════════════════════════════════════╣
║  API Health:      http://localhost:{port}/api/health       ║
╚═══════════════════════════════════════════════════════════╝
    """)

    app.run(host='0.0.0.0', port=port, debug=debug, threaded=True)
