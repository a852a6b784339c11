import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from config import Config, configure_logging
from InputParser import ParserError, parse_input_text
from ScheduleProcessor import InMemoryOutputSink, ProcessorError, ScheduleProcessor
from TimestampOrdering import DataItemRegistry, TimestampOrdering, TransactionRegistry

logger = logging.getLogger(__name__)


def create_app(config=None):
    config = config or Config()

    app = Flask(__name__)
    app.config["COMMIT_POLICY"] = config.commit_policy
    app.config["DEBUG"] = config.debug
    CORS(app)

    # Each request gets its own scheduler; registries are never shared.
    @app.route('/to', methods=['POST'])
    def run_timestamp_ordering():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        input_text = data.get('input', '')
        if not isinstance(input_text, str) or not input_text.strip():
            return jsonify({'error': 'Missing input'}), 400

        commit_policy = data.get('commit_policy', app.config["COMMIT_POLICY"])
        if commit_policy not in TimestampOrdering.COMMIT_POLICIES:
            return jsonify({'error': f'Unknown commit policy: {commit_policy}'}), 400

        try:
            parsed = parse_input_text(input_text)
            scheduler = TimestampOrdering(
                DataItemRegistry(parsed.data_items),
                TransactionRegistry(parsed.transactions),
                commit_policy=commit_policy,
            )
            sink = InMemoryOutputSink()
            ScheduleProcessor(scheduler).process(parsed.schedule_plans, sink)
        except (ParserError, ProcessorError) as e:
            logger.warning("Rejected request: %s", e)
            return jsonify({'error': str(e)}), 400

        return jsonify({'result': sink.verdicts, 'logs': sink.audit_logs}), 200

    return app


app = create_app()

if __name__ == '__main__':
    configure_logging(Config().log_level)
    app.run(debug=app.config["DEBUG"])
